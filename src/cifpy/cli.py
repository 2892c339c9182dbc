"""
Loads a FAA CIFP file and prints what it contains.

"""
import sys
import json
import logging
import argparse

from cifpy import __version__
from cifpy.exceptions import CIFPError, ResolutionError
from cifpy.airspace import CIFP

logger = logging.getLogger("cifpy")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Read FAA CIFP file.")
    parser.add_argument("filename", nargs="?", type=str, help="CIFP file, FAACIFP18 in data directory if absent")
    parser.add_argument("--airport", "-a", type=str, help="print airport information")
    parser.add_argument("--airway", "-w", type=str, help="print airway information")
    parser.add_argument("--procedure", "-p", type=str, help="print procedure information, use with --airport")
    parser.add_argument("--fix", "-f", type=str, help="print fix position")
    parser.add_argument("--route", "-r", nargs=2, metavar=("FROM", "TO"), help="print airway route between two fixes")
    parser.add_argument("--workers", "-j", type=int, help="number of parsing processes")
    parser.add_argument("--verbose", "-v", action="count", default=0)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose > 1 else (logging.INFO if args.verbose == 1 else logging.WARNING))

    try:
        cifp = CIFP.from_file(args.filename, workers=args.workers)
    except CIFPError as e:
        logger.error(f":main: {e}")
        return 1

    info = None
    if args.procedure is not None:
        if args.airport is None:
            parser.error("--procedure needs --airport")
        p = cifp.procedure(args.airport.upper(), args.procedure.upper())
        info = p.getInfo() if p is not None else None
    elif args.airport is not None:
        a = cifp.aerodromes.get(args.airport.upper())
        if a is not None:
            info = a.getInfo()
            info["runways"] = [r.identifier for r in cifp.runways.get(a.identifier, [])]
            info["procedures"] = [str(p) for p in cifp.airport_procedures(a.identifier)]
    elif args.airway is not None:
        aws = cifp.airways.get(args.airway.upper())
        info = [aw.getInfo() for aw in aws] if aws is not None else None
    elif args.fix is not None:
        try:
            info = cifp.concretize(args.fix.upper()).getInfo()
        except ResolutionError as e:
            info = {"error": str(e), "candidates": [c.getInfo() for c in cifp.fixes.get(args.fix.upper(), [])]}
    elif args.route is not None:
        info = cifp.route(args.route[0].upper(), args.route[1].upper())
    else:
        info = cifp.getInfo()

    if info is None:
        print("not found")
        return 1
    print(json.dumps(info, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
