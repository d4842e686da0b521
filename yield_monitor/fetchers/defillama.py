"""
DefiLlama Yields Fetcher - Broad pool coverage from the public yields dataset.

Endpoint used
-------------
    GET https://yields.llama.fi/pools
    Returns: {"status": "success", "data": [{project, chain, symbol, pool, apy, tvlUsd, ...}]}
"""

import logging
from typing import Any, Dict, List, Sequence

import requests

from ..config.settings import AGGREGATOR_CONFIG
from ..core.models import PoolMetric

logger = logging.getLogger(__name__)


def filter_records(records: List[Dict[str, Any]], protocol_filters: Sequence[str]) -> List[Dict[str, Any]]:
    """
    Keep records whose project contains any filter term (case-insensitive).

    With no filters, only the first `max_unfiltered_records` records are kept.
    """
    if not protocol_filters:
        return records[:AGGREGATOR_CONFIG["max_unfiltered_records"]]

    terms = [p.lower() for p in protocol_filters]
    return [
        record for record in records
        if any(term in (record.get("project") or "").lower() for term in terms)
    ]


def record_to_metric(record: Dict[str, Any]) -> PoolMetric:
    return PoolMetric(
        protocol=record.get("project"),
        chain=record.get("chain"),
        pool=record.get("symbol"),
        address=record.get("pool"),
        apy=float(record.get("apy") or 0),
        tvl=float(record.get("tvlUsd") or 0),
    )


def fetch_aggregated_metrics(protocol_filters: Sequence[str] = ()) -> List[PoolMetric]:
    """
    Fetch pool metrics from the DefiLlama yields dataset.

    Args:
        protocol_filters: Project name terms to keep; empty takes the first 30 pools

    Returns:
        PoolMetric per kept record, or empty on any failure / timeout
    """
    url = AGGREGATOR_CONFIG["url"]

    try:
        response = requests.get(url, timeout=AGGREGATOR_CONFIG["timeout_seconds"])
        response.raise_for_status()
        records = response.json()["data"]

        metrics = [record_to_metric(r) for r in filter_records(records, protocol_filters)]
        logger.info(f"Fetched {len(metrics)} DefiLlama pools")
        return metrics

    except requests.Timeout:
        logger.error(f"Timeout fetching DefiLlama metrics after {AGGREGATOR_CONFIG['timeout_seconds']}s")
        return []
    except Exception as e:
        logger.error(f"Error fetching DefiLlama metrics: {e}")
        return []
