"""JSON output formatter for CLI."""

import datetime as _dt
import json
import sys
from enum import Enum as _Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from ...history import HistoryEntry
from ...quote import Quote
from ...validation import ValidationReport


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - datetime/date -> ISO 8601 string
    - Enum -> value (fallback to name)
    - Path -> string
    - Fallback -> str(obj)
    """
    if isinstance(obj, (_dt.datetime, _dt.date)):
        return obj.isoformat()
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    if isinstance(obj, Path):
        return str(obj)
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def format_quote_json(quote: Quote) -> Dict[str, Any]:
    """Format a quote for JSON output.

    The recommendation label and reason are added next to the raw value so
    scripted callers do not have to map them.
    """
    data = quote.to_dict()
    recommendation = quote.result.recommendation
    data["recommendation"] = (
        {
            "value": recommendation.value,
            "label": recommendation.label,
            "reason": recommendation.reason,
        }
        if recommendation
        else None
    )
    data["used_fallback_pricing"] = quote.pricing.is_fallback
    return data


def format_models_list_json(models: Dict[str, Any]) -> Dict[str, Any]:
    """Format models list for JSON output.

    Args:
        models: Mapping of model name to its description

    Returns:
        Formatted data structure
    """
    sorted_models = [{"name": name, **model_data} for name, model_data in sorted(models.items())]
    return {"models": sorted_models, "count": len(models)}


def format_validation_json(report: ValidationReport) -> Dict[str, Any]:
    return report.to_dict()


def format_history_json(entries: List[HistoryEntry], path: str) -> Dict[str, Any]:
    """Format history entries for JSON output."""
    return {
        "entries": [entry.to_dict() for entry in entries],
        "count": len(entries),
        "path": path,
    }


def format_data_paths_json(paths: Dict[str, Any]) -> Dict[str, Any]:
    """Format data paths for JSON output.

    Args:
        paths: Mapping of file name to path information

    Returns:
        Formatted data structure
    """
    return {"data_paths": paths}


def format_env_vars_json(env_vars: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """Format environment variables for JSON output."""
    return {"environment_variables": env_vars}
