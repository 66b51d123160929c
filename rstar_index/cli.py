from __future__ import annotations
import argparse
import logging
from time import perf_counter

from .metrics import tree_stats
from .options import RTreeOptions
from .rtree import RTree
from .sources import load_boxes

logger = logging.getLogger(__name__)


def _parse_query(s: str):
    parts = [p.strip() for p in (s or "").split(",") if p.strip()]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError(f"Expected minx,miny,maxx,maxy, got: {s}")
    try:
        minx, miny, maxx, maxy = (float(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Non-numeric query bound in: {s}")
    return (minx, miny, maxx, maxy)


def build_tree(path: str, geom_col: str, options: RTreeOptions) -> RTree:
    boxes = load_boxes(path, geom_col=geom_col)
    tree = RTree(options)
    start = perf_counter()
    for key, env in boxes:
        tree.insert(env, key)
    logger.info("Inserted %d boxes in %.3fs (height=%d)", len(tree), perf_counter() - start, tree.height)
    return tree


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(relativeCreated).0fms] %(levelname)s %(name)s: %(message)s",
    )
    ap = argparse.ArgumentParser(
        description="Build an R*-tree from a box index (CSV or GeoParquet) and report its quality."
    )
    ap.add_argument("--input", required=True, help="CSV with id,minx,miny,maxx,maxy or a GeoParquet file.")
    ap.add_argument("--geom-col", default="geometry", help="Geometry column name for GeoParquet (default: geometry).")
    ap.add_argument("--max-entries", type=int, default=RTreeOptions.DEFAULT_MAX_ENTRIES,
                    help="Node capacity (default: 16).")
    ap.add_argument("--min-fill", type=float, default=RTreeOptions.DEFAULT_MIN_FILL,
                    help="Minimum fill ratio of a split node, in (0, 0.5] (default: 0.4).")
    ap.add_argument("--query", type=_parse_query, default=None,
                    help='Optional range query "minx,miny,maxx,maxy".')

    args = ap.parse_args(argv)

    options = RTreeOptions({
        RTreeOptions.MaxEntries: args.max_entries,
        RTreeOptions.MinFill: args.min_fill,
    })
    tree = build_tree(args.input, args.geom_col, options)

    stats = tree_stats(tree)
    logger.info("Tree: size=%d height=%d leaves=%d avg_entries_per_leaf=%.2f load_factor=%.3f",
                stats["size"], stats["height"], stats["num_leaves"],
                stats["avg_entries_per_leaf"], stats["load_factor"])
    for depth, value in enumerate(stats["sibling_overlap"]):
        logger.info("Sibling overlap at depth %d: %.6g", depth, value)

    if args.query is not None and len(tree) > 0:
        start = perf_counter()
        hits = tree.search(args.query)
        logger.info("Query %s matched %d boxes in %.3fms", args.query, len(hits), (perf_counter() - start) * 1e3)

    return stats


if __name__ == "__main__":
    main()
