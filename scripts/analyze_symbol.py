"""One-shot script to print a market analysis report as JSON.

Usage (from the project root):
    python -m scripts.analyze_symbol SPY --style scalping
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from scalpbot.broker.tradier_client import TradierClient
from scalpbot.config import load_config
from scalpbot.strategy.analyzer import MarketAnalyzer


async def _main(symbol: str, style: str, direction: str | None) -> None:
    config = load_config()
    broker = TradierClient(config)
    analyzer = MarketAnalyzer(broker, tz_name=config.exchange_timezone)
    report = await analyzer.analyze(symbol, style=style or config.trading_style, direction=direction)
    print(json.dumps(report.to_dict(), indent=2))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Analyze one symbol via Tradier")
    parser.add_argument("symbol")
    parser.add_argument("--style", default=None, help="scalping, daytrading or swing")
    parser.add_argument("--direction", choices=["CALL", "PUT"], default=None)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    asyncio.run(_main(args.symbol, args.style, args.direction))
