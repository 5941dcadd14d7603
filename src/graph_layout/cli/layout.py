#!/usr/bin/env python3
"""
Lay out a DOT graph in 3D and write the animation.

Usage (example):
  graph-layout examples/pipeline.dot \
      --config configs/default.yaml \
      --seed 7 \
      --html plots/pipeline.html \
      --jsonl plots/pipeline.jsonl

Notes:
 - Without --seed every run starts from a different random layout.
 - Ctrl-C stops after the current outer iteration; frames produced so far
   are still written.
 - Exit status: 0 on success, 2 for an unreadable or invalid graph/config,
   1 when a frame output cannot be opened or written.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import argparse
import logging
import signal
import sys
import threading

import yaml

from graph_layout.config import load_config
from graph_layout.dot_source import load_dot
from graph_layout.errors import MalformedGraphError, SinkTransportError
from graph_layout.sinks import FrameSink, JsonLinesSink, PlotlySink, RecordingSink
from graph_layout.solver import LayoutSolver
from graph_layout.frames import FrameMessage

logger = logging.getLogger("graph_layout.cli")


class _FanOutSink(FrameSink):
    def __init__(self, sinks: List[FrameSink]):
        self.sinks = sinks

    def send(self, message: FrameMessage) -> None:
        for sink in self.sinks:
            sink.send(message)

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dimension-annealed 3D layout of a DOT graph")
    parser.add_argument("dot_file", type=str, help="Path to a Graphviz DOT file")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML/JSON SimulationConfig")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: non-reproducible)")
    parser.add_argument("--outer", type=int, default=None, help="Outer iterations per phase")
    parser.add_argument("--inner", type=int, default=None, help="Inner iterations per outer iteration")
    parser.add_argument("--max-dims", type=int, default=None)
    parser.add_argument("--batched", action="store_true", help="Use the batched (vectorized) force passes")
    parser.add_argument("--strict", action="store_true", help="Reject edges to nodes that are never declared")
    parser.add_argument("--html", type=str, default=None, help="Write an animated Plotly figure here")
    parser.add_argument("--jsonl", type=str, default=None, help="Write one JSON frame per line here ('-' for stdout)")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        cfg = load_config(
            args.config,
            seed=args.seed,
            outer_iterations=args.outer,
            inner_iterations=args.inner,
            max_dims=args.max_dims,
            force_mode="batched" if args.batched else None,
        )
    except (OSError, ValueError, yaml.YAMLError) as e:
        # pydantic's ValidationError is a ValueError
        logger.error("Invalid configuration: %s", e)
        return 2
    try:
        model = load_dot(args.dot_file, implicit_nodes=not args.strict)
    except MalformedGraphError as e:
        logger.error("Invalid graph %s: %s", args.dot_file, e)
        return 2
    except OSError as e:
        logger.error("Cannot read %s: %s", args.dot_file, e)
        return 2

    sinks: List[FrameSink] = []
    try:
        if args.html:
            Path(args.html).parent.mkdir(parents=True, exist_ok=True)
            sinks.append(PlotlySink(title=Path(args.dot_file).stem, html_path=args.html))
        if args.jsonl == "-":
            sinks.append(JsonLinesSink(sys.stdout))
        elif args.jsonl:
            Path(args.jsonl).parent.mkdir(parents=True, exist_ok=True)
            sinks.append(JsonLinesSink(args.jsonl))
    except (OSError, SinkTransportError) as e:
        logger.error("Cannot open frame output: %s", e)
        return 1
    if not sinks:
        logger.warning("No --html or --jsonl output requested; frames are discarded")
        sinks.append(RecordingSink())

    cancel = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda *_: cancel.set())
    solver = LayoutSolver.from_model(model, cfg)
    logger.info("Laying out %s: %d nodes, %d edges, %d frames scheduled",
                args.dot_file, model.node_count, model.edge_count, cfg.total_frames())
    try:
        with _FanOutSink(sinks) as sink:
            result = solver.run(sink, cancel)
    except SinkTransportError as e:
        logger.error("Frame output failed: %s", e)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous)

    logger.info("Finished in state %s after %d frames", result.state.value, result.frames_emitted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
