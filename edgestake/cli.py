"""
Command line entry point.

Reads a JSON :class:`~edgestake.schemas.StakingRequest` from a file (or
stdin) and prints the result as JSON::

    edgestake kelly horses.json --bankroll 1000
    cat coin.json | edgestake sim --iterations 10000 --seed 7 --workers 4

Values missing from the document fall back to ``EDGESTAKE_*`` environment
variables (a ``.env`` file in the working directory is loaded first), then
to the built-in defaults.  Command-line flags win over both.

Exit status: 0 on success, 1 when there is nothing to stake (no positive
edge, no arbitrage), 2 for invalid input.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from edgestake import __version__
from edgestake.core.config import SimulationSettings, StakingOptions
from edgestake.core.errors import StakingError
from edgestake.core.price import TaggedAmount
from edgestake.schemas import StakingRequest
from edgestake.services.arbitrage import arb
from edgestake.services.expectation import ev
from edgestake.services.simulation import run_simulation
from edgestake.services.staking import kelly

logger = logging.getLogger(__name__)

# Request fields that can be set from the command line.
_OVERRIDABLE = ("bankroll", "independent", "iterations", "seed", "workers")


def _amounts(tagged: List[TaggedAmount]) -> List[Dict[str, Any]]:
    return [{"label": t.label, "amount": t.amount} for t in tagged]


# ---------------------------------------------------------------------------
# Sub-commands
# ---------------------------------------------------------------------------

def _run_ev(request: StakingRequest, args: argparse.Namespace) -> Dict[str, Any]:
    return {"expectations": _amounts(ev(request.to_edges(), request.options()))}


def _run_kelly(request: StakingRequest, args: argparse.Namespace) -> Dict[str, Any]:
    return {"stakes": _amounts(kelly(request.to_edges(), request.options()))}


def _run_arb(request: StakingRequest, args: argparse.Namespace) -> Dict[str, Any]:
    plan = arb(request.to_edges(), request.options(), full_outlay=args.full_outlay)
    return {
        "stakes": _amounts(plan.sizes),
        "total_staked": round(plan.total_staked, 2),
        "profit": plan.profit,
    }


def _run_sim(request: StakingRequest, args: argparse.Namespace) -> Dict[str, Any]:
    settings = SimulationSettings.from_env()
    if args.renormalize:
        settings = replace(settings, renormalize=True)
    result = run_simulation(
        request.to_edges(),
        request.iterations,
        request.options(),
        seed=request.seed,
        workers=request.workers,
        settings=settings,
    )
    low, high = result.confidence_interval()
    return {
        "net_win": result.net_win,
        "stakes": _amounts(result.stakes),
        "total_staked": result.total_staked,
        "mean_return": result.mean_return,
        "return_std": result.return_std,
        "iterations": result.iterations,
        "confidence_interval": [low, high],
    }


_COMMANDS = {
    "ev": _run_ev,
    "kelly": _run_kelly,
    "arb": _run_arb,
    "sim": _run_sim,
}


# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edgestake",
        description="Stake sizing for advantage betting situations.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "input", nargs="?", default="-",
        help="Request JSON file (default: read stdin)",
    )
    common.add_argument("--bankroll", type=float, help="Amount available to wager")
    common.add_argument(
        "--independent", action="store_true", default=None,
        help="Treat the edges as independent events",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("ev", parents=[common], help="Expected return of each edge")
    sub.add_parser("kelly", parents=[common], help="Kelly stake for each edge")

    arb_parser = sub.add_parser("arb", parents=[common], help="Size an arbitrage")
    arb_parser.add_argument(
        "--full-outlay", action="store_true",
        help="Stake the whole bankroll instead of targeting a bankroll-sized payout",
    )

    sim_parser = sub.add_parser("sim", parents=[common], help="Monte Carlo net win of the Kelly plan")
    sim_parser.add_argument("--iterations", type=int, help="Number of trials")
    sim_parser.add_argument("--seed", type=int, help="Seed for reproducible runs")
    sim_parser.add_argument("--workers", type=int, help="Worker threads")
    sim_parser.add_argument(
        "--renormalize", action="store_true",
        help="Rescale outcome probabilities to sum to one",
    )
    return parser


def _read_document(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as fh:
        return fh.read()


def resolve_request(text: str, args: argparse.Namespace) -> StakingRequest:
    """
    Validate the request document and layer environment defaults and
    command-line overrides on top of it.
    """
    request = StakingRequest.model_validate_json(text)

    env_options = StakingOptions.from_env()
    env_settings = SimulationSettings.from_env()
    env_defaults = {
        "bankroll": env_options.bankroll,
        "independent": env_options.independent,
        "iterations": env_settings.iterations,
        "seed": env_settings.seed,
        "workers": env_settings.workers,
    }

    data = request.model_dump()
    for key in _OVERRIDABLE:
        if key not in request.model_fields_set:
            data[key] = env_defaults[key]
        override = getattr(args, key, None)
        if override is not None:
            data[key] = override
    return StakingRequest.model_validate(data)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )

    try:
        request = resolve_request(_read_document(args.input), args)
        result = _COMMANDS[args.command](request, args)
    except StakingError as exc:
        print(json.dumps({"error": str(exc)}))
        return 1
    except (OSError, ValidationError, ValueError) as exc:
        logger.error("Invalid input: %s", exc)
        return 2

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
