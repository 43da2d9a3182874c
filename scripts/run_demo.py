#!/usr/bin/env python
"""
Optionlet Stripping Demo Script

This script demonstrates the full workflow of the library:
1. Build a forecasting curve and an Ibor index
2. Load cap/floor term volatility quotes
3. Strip optionlet volatilities
4. Export the stripped grids

Usage:
    python run_demo.py [--quotes QUOTES_CSV] [--output-dir OUTPUT_DIR]
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import pandas as pd

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from capletlib import (
    BootstrapInversionError,
    IborIndex,
    OptionletStripper,
    Settings,
    StripperConfig,
    create_flat_curve,
    load_capfloor_vols,
)
from capletlib.conventions import DayCount


def build_index(valuation_date: date, tenor: str, rate: float) -> IborIndex:
    """Ibor index forecasting off a flat curve."""
    print("\n" + "="*60)
    print("Building Forecasting Curve and Index")
    print("="*60)

    curve = create_flat_curve(valuation_date, rate)
    index = IborIndex(f"USD-LIBOR-{tenor}", tenor, curve, fixing_days=2,
                      day_count=DayCount.ACT_360)
    print(f"  Flat curve @ {rate*100:.3f}% (continuous, ACT/365)")
    print(f"  Index: {index.name}, fixing days {index.fixing_days}")
    return index


def print_surface(surface) -> None:
    print("\n" + "="*60)
    print("Cap/Floor Term Volatilities")
    print("="*60)
    frame = surface.to_frame()
    frame.columns = [f"{k*100:.2f}%" for k in frame.columns]
    print((frame * 100).round(2).to_string())


def print_results(stripper: OptionletStripper) -> None:
    print("\n" + "="*60)
    print("Stripped Optionlet Volatilities")
    print("="*60)

    vols = stripper.to_frame("optionlet_vols")
    vols.columns = [f"{k*100:.2f}%" for k in vols.columns]
    vols.insert(0, "fixing", stripper.optionlet_fixing_dates())
    vols.insert(1, "atm", [f"{r*100:.3f}%" for r in stripper.atm_optionlet_rates()])
    for col in vols.columns[2:]:
        vols[col] = (vols[col] * 100).round(2)
    print(vols.to_string())


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Optionlet Stripping Demo")
    parser.add_argument(
        "--quotes",
        type=str,
        default=None,
        help="Long-format CSV with tenor, strike, vol columns"
    )
    parser.add_argument("--index-tenor", type=str, default="3M", help="Index tenor")
    parser.add_argument("--rate", type=float, default=0.04, help="Flat forecasting rate")
    parser.add_argument(
        "--switch-strike",
        type=float,
        default=None,
        help="Floors below this strike, caps at or above"
    )
    parser.add_argument(
        "--annuity-discount",
        choices=["fixing", "payment"],
        default="fixing",
        help="Date at which the optionlet annuity is discounted"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="./output",
        help="Output directory for stripped grids"
    )
    parser.add_argument("--verbose", action="store_true", help="Log every bootstrapped cell")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Setup paths
    script_dir = Path(__file__).parent
    quotes_path = Path(args.quotes) if args.quotes else script_dir.parent / "data" / "capfloor_vols.csv"
    output_dir = Path(args.output_dir)

    # Valuation date
    valuation_date = date(2024, 1, 15)
    Settings.instance().evaluation_date = valuation_date

    print("="*60)
    print("OPTIONLET STRIPPING DEMO")
    print(f"Valuation Date: {valuation_date}")
    print("="*60)

    index = build_index(valuation_date, args.index_tenor, args.rate)
    surface = load_capfloor_vols(quotes_path)
    print_surface(surface)

    config = StripperConfig(annuity_discount=args.annuity_discount)
    stripper = OptionletStripper(surface, index, switch_strikes=args.switch_strike, config=config)
    print(f"\n{stripper}")

    try:
        print_results(stripper)
    except BootstrapInversionError as e:
        print(f"\nStripping failed:\n{e}")
        return 1

    output_dir.mkdir(parents=True, exist_ok=True)
    stripper.to_frame("optionlet_vols").to_csv(output_dir / "optionlet_vols.csv")
    summary: pd.DataFrame = stripper.summary()
    summary.to_csv(output_dir / "optionlet_summary.csv", index=False)
    print(f"\nWrote {len(summary)} cells to {output_dir.resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
