#!/usr/bin/env python3
"""
Predict the minimum free energy structure of a DNA or RNA sequence from the command line.

The polymer is detected from the alphabet: A/C/G/T folds with the DNA
parameters, A/C/G/U with the RNA parameters.

Examples:
  - python -m mfe_fold "GGGGAAAACCCC"
  - mfe-fold --json --temp 50 "GGGGUUUUCCCC"
  - mfe-fold -vv --log-file var/log/fold.log "GGGAGGTCGTTACATCTGGGTAACACCGGTACTGATCCGGTGACCTCCC"
"""

# --- Standard Library Imports ---
from __future__ import annotations
import argparse
import json
import logging
import math
import sys
import time
from typing import Optional, Sequence, Tuple

# --- Local Application Imports ---
from mfe_fold.folding.context import FoldingContext
from mfe_fold.folding.errors import AlphabetError, FoldingError
from mfe_fold.folding.recurrences import FoldingConfig
from mfe_fold.folding.traceback import traceback
from mfe_fold.utils.logging_utils import DEFAULT_LOG_DIR, setup_logger

# Set up module logger
logger = logging.getLogger(__name__)


# --------------------------
# Logging Configuration
# --------------------------
def setup_cli_logging(verbose_level: int, log_file: Optional[str] = None) -> None:
    """
    Configures logging for the CLI and the folding modules.

    Parameters
    ----------
    verbose_level : int
        0 for WARNING, 1 for INFO, 2 or more for DEBUG.
    log_file : Optional[str]
        Explicit log file. When omitted and `verbose_level > 0`, a timestamped
        file is created under `var/log/`.
    """
    level_map = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    log_level = level_map.get(min(verbose_level, 2), logging.INFO)

    should_log_to_file = (verbose_level > 0) or (log_file is not None)

    loggers_to_configure = [
        __name__,
        "mfe_fold.folding.context",
        "mfe_fold.folding.recurrences",
        "mfe_fold.folding.traceback",
    ]

    for logger_name in loggers_to_configure:
        setup_logger(
            logger_name,
            level=log_level,
            log_file=log_file,
            enable_file_logging=should_log_to_file,
        )

    if should_log_to_file and log_file is None:
        logger.info(f"Logs will be saved to: {DEFAULT_LOG_DIR.resolve()}")


# --------------------------
# Helpers
# --------------------------
def predict(seq: str, temp_c: float, verbose: bool = False) -> Tuple[str, str, float]:
    """
    Folds `seq` and returns its polymer kind, dot-bracket structure and ΔG.

    Raises
    ------
    AlphabetError
        If `seq` is neither DNA nor RNA.
    """
    start_time = time.perf_counter()

    context = FoldingContext.create(seq, temp_c, config=FoldingConfig(verbose=verbose))
    result = traceback(context)
    delta_g = result.minimum_free_energy()

    elapsed = time.perf_counter() - start_time
    logger.info(f"Prediction completed in {elapsed:.2f}s")
    logger.info(f"Energy: {delta_g:.2f} kcal/mol")

    return context.energies.KIND, result.dot_bracket(), delta_g


# --------------------------
# Command-Line Interface
# --------------------------
def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parses command-line arguments and prints the predicted structure.

    Returns 0 on success, 2 when the sequence alphabet is rejected and 1 when
    folding fails. With `--json` a failure prints an `{"error": ...}` object on
    stdout instead of the message on stderr.
    """
    parser = argparse.ArgumentParser(description="Predict DNA/RNA secondary structure (dot-bracket) and ΔG.")
    parser.add_argument("sequence", help="DNA (A,C,G,T) or RNA (A,C,G,U) sequence, any case")
    parser.add_argument("--temp", type=float, default=37.0,
                        help="Temperature in °C (default: 37.0).")
    parser.add_argument("--json", action="store_true",
                        help="Emit JSON instead of human-readable text.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("--log-file", default=None,
                        help="Path to log file (default: var/log/<module>_TIMESTAMP.log if verbose)")

    cli_args = parser.parse_args(argv)

    setup_cli_logging(cli_args.verbose, cli_args.log_file)

    sequence = cli_args.sequence.strip()

    try:
        kind, structure, delta_g = predict(sequence, cli_args.temp, verbose=cli_args.verbose > 0)
    except AlphabetError as e:
        logger.error(f"Sequence validation failed: {e}")
        if cli_args.json:
            print(json.dumps({"error": str(e), "error_type": "AlphabetError", "sequence": sequence.upper()}))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 2
    except FoldingError as e:
        logger.error(f"Prediction failed: {e}", exc_info=True)
        if cli_args.json:
            print(json.dumps({"error": str(e), "error_type": type(e).__name__, "sequence": sequence.upper()}))
        else:
            print(f"Prediction failed: {e}", file=sys.stderr)
        return 1

    if cli_args.json:
        print(json.dumps({
            "kind": kind,
            "sequence": sequence.upper(),
            "dot_bracket": structure,
            "delta_G_kcal_per_mol": delta_g if math.isfinite(delta_g) else None,
            "temperature_c": cli_args.temp,
            "length": len(sequence),
        }, indent=2))
    else:
        print(f"Kind : {kind}")
        print(f"Sequence Length : {len(sequence)}")
        print(f"Sequence : {sequence.upper()}")
        print(f"Dot-Bracket Notation: {structure}")
        print(f"ΔG (kcal/mol): {delta_g:.2f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
