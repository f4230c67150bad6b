"""Expected return and risk estimated from a ticker's monthly price history."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

import numpy as np
import pandas as pd
import yfinance as yf

from core.exceptions import DataFetchError
from utils.helpers import rate_to_percent

# Configure module logger
logger = logging.getLogger(__name__)

# Shortest history that gives a meaningful annual estimate
MIN_MONTHS = 12


@dataclass(frozen=True)
class MarketEstimate:
    """
    Annualized return and volatility of a ticker, in percent.

    Attributes:
        ticker: Symbol the estimate was computed for
        expected_return: Annualized mean monthly return (compounded), percent
        risk: Annualized standard deviation of monthly returns, percent
        n_months: Number of monthly returns used
        start_date: First month of the history (YYYY-MM-DD)
        end_date: Last month of the history (YYYY-MM-DD)
    """

    ticker: str
    expected_return: float
    risk: float
    n_months: int
    start_date: str
    end_date: str


def _format_date(value: object) -> str:
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _cache_path(cache_dir: Path, ticker: str) -> Path:
    return cache_dir / f"prices_{ticker.upper()}.json"


def _cache_is_fresh(cache_path: Path, max_age_days: int) -> bool:
    if not cache_path.exists():
        return False
    max_age = datetime.now() - timedelta(days=max_age_days)
    return datetime.fromtimestamp(cache_path.stat().st_mtime) >= max_age


def _save_cache(prices: pd.Series, cache_path: Path) -> None:
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "dates": [_format_date(d) for d in prices.index],
        "prices": prices.astype(float).tolist(),
    }
    with cache_path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle)


def _load_cache(cache_path: Path) -> pd.Series:
    with cache_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return pd.Series(payload["prices"], index=pd.to_datetime(payload["dates"])).sort_index()


def _fetch_yfinance_prices(ticker: str) -> pd.Series:
    """Fetch monthly adjusted closing prices from yfinance."""
    logger.info(f"Fetching monthly prices from yfinance for: {ticker}")

    try:
        price_data = yf.download(
            tickers=ticker,
            auto_adjust=True,
            progress=False,
            interval="1mo",
            period="max",
        )["Close"]
    except Exception as e:
        logger.error(f"yfinance download failed: {e}")
        raise DataFetchError("yfinance", str(e)) from e

    # Recent yfinance versions return one column per ticker
    if isinstance(price_data, pd.DataFrame):
        if price_data.shape[1] == 0:
            raise DataFetchError("yfinance", f"No price data for {ticker}")
        price_data = price_data.iloc[:, 0]

    prices = price_data.dropna()
    if prices.empty:
        raise DataFetchError("yfinance", f"No price data for {ticker}")

    logger.info(f"Fetched {len(prices)} months of prices from yfinance")
    return prices


def get_monthly_prices(
    ticker: str,
    cache_dir: Path,
    max_age_days: int = 30,
) -> pd.Series:
    """
    Get monthly prices for a ticker, using the cache when it is fresh.

    Args:
        ticker: Ticker symbol
        cache_dir: Directory for cached price files
        max_age_days: Maximum cache age in days

    Returns:
        Series of monthly closing prices indexed by date

    Raises:
        DataFetchError: If no cached data is usable and the download fails
    """
    cache_path = _cache_path(cache_dir, ticker)

    if _cache_is_fresh(cache_path, max_age_days):
        logger.info(f"Using cached prices from {cache_path}")
        try:
            return _load_cache(cache_path)
        except (OSError, KeyError, ValueError) as e:
            logger.warning(f"Failed to load cache: {e}")

    prices = _fetch_yfinance_prices(ticker)

    try:
        _save_cache(prices, cache_path)
        logger.info(f"Saved {len(prices)} months to cache at {cache_path}")
    except OSError as e:
        logger.warning(f"Failed to save cache: {e}")

    return prices


def summarize_returns(ticker: str, monthly_returns: pd.Series) -> MarketEstimate:
    """
    Annualize simple monthly returns.

    expected_return = (1 + mean)^12 - 1 and risk = std * sqrt(12),
    both reported in percent.

    Raises:
        DataFetchError: If fewer than MIN_MONTHS returns are available
    """
    returns = monthly_returns.dropna()
    if len(returns) < MIN_MONTHS:
        raise DataFetchError(
            ticker, f"Need at least {MIN_MONTHS} months of history, got {len(returns)}"
        )

    mean_monthly = float(returns.mean())
    std_monthly = float(returns.std())

    return MarketEstimate(
        ticker=ticker,
        expected_return=rate_to_percent((1 + mean_monthly) ** 12 - 1),
        risk=rate_to_percent(float(std_monthly * np.sqrt(12))),
        n_months=len(returns),
        start_date=_format_date(returns.index.min()),
        end_date=_format_date(returns.index.max()),
    )


def estimate_return_and_risk(
    ticker: str,
    cache_dir: Path,
    max_age_days: int = 30,
) -> MarketEstimate:
    """
    Suggest expected return and risk settings from a ticker's history.

    Args:
        ticker: Ticker symbol (e.g. "SPY")
        cache_dir: Directory for cached price files
        max_age_days: Maximum cache age in days

    Returns:
        MarketEstimate in percent per year
    """
    ticker = ticker.strip().upper()
    if not ticker:
        raise DataFetchError("yfinance", "Ticker symbol is empty")

    prices = get_monthly_prices(ticker, cache_dir, max_age_days)
    returns = prices.pct_change().dropna()

    estimate = summarize_returns(ticker, returns)
    logger.info(
        f"{ticker}: {estimate.expected_return:.2f}% return, "
        f"{estimate.risk:.2f}% risk over {estimate.n_months} months"
    )
    return estimate
