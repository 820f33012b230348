import argparse
import json
import logging
import random
import sys

from .graph_engine import GraphEngine, LayoutValidationError
from .similarity import build_similarity_graph

logger = logging.getLogger(__name__)

DEMO_FEEDS = [("tech", "#00bcd4"), ("world", "#ff9800"), ("science", "#8bc34a")]


def load_graph_file(path):
    """Reads {"articles": [...], "similarity": [[...]], "negative_edges": bool}."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)

    if not isinstance(payload, dict):
        raise LayoutValidationError(f"{path}: expected a JSON object, got {type(payload).__name__}")
    articles = payload.get("articles", [])
    if not isinstance(articles, list):
        raise LayoutValidationError(f"{path}: \"articles\" must be a list")
    similarity = payload.get("similarity")
    negative_edges = bool(payload.get("negative_edges", True))
    logger.info(f"Read {len(articles)} articles from {path}")
    return build_similarity_graph(articles, similarity, negative_edges=negative_edges)


def demo_graph(per_feed=8, seed=None):
    """Articles from a few feeds, more similar within a feed than across."""
    rng = random.Random(seed)
    articles = []
    feeds = []
    for feed, color in DEMO_FEEDS:
        for i in range(per_feed):
            articles.append({"id": f"{feed}-{i}", "title": f"{feed.title()} story {i}", "feedColor": color})
            feeds.append(feed)

    n = len(articles)
    matrix = [[1.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            base = 0.6 if feeds[i] == feeds[j] else -0.2
            value = max(-1.0, min(1.0, base + rng.uniform(-0.3, 0.3)))
            matrix[i][j] = matrix[j][i] = value
    return build_similarity_graph(articles, matrix, negative_edges=False)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="feedgraph", description="Force-directed layout of article similarity graphs")
    parser.add_argument("graph", nargs="?", help="graph JSON file (a demo graph is used when omitted)")
    parser.add_argument("--headless", action="store_true", help="run the layout without a window and print positions")
    parser.add_argument("--ticks", type=int, default=300, help="maximum ticks in headless mode")
    parser.add_argument("--width", type=float, default=800.0)
    parser.add_argument("--height", type=float, default=600.0)
    parser.add_argument("--seed", type=int, default=None, help="random seed for the demo graph")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def run_headless(engine, max_ticks, out=None):
    out = out or sys.stdout
    ticks = engine.run(max_ticks)
    logger.info(f"Ran {ticks} ticks")
    positions = {str(uid): [x, y] for uid, (x, y) in engine.positions().items()}
    json.dump(positions, out, indent=2)
    out.write("\n")
    return positions


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    engine = GraphEngine({"width": args.width, "height": args.height})
    graph = load_graph_file(args.graph) if args.graph else demo_graph(seed=args.seed)
    engine.load_from_networkx(graph)

    if args.headless:
        run_headless(engine, args.ticks)
        return 0

    from PyQt6.QtWidgets import QApplication
    from .ui.main_window import MainWindow

    app = QApplication(sys.argv[:1])
    window = MainWindow(engine)
    window.show()
    window.graph_widget.start()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
