"""
Well service client — thin wrappers over the remote REST API.

Every function performs exactly one HTTP call and returns parsed domain
objects. Network and HTTP errors propagate as ``requests`` exceptions;
payloads of the wrong shape raise ``ValueError``. Callers (the UI and CLI)
decide how to report them.
"""

import logging
from pathlib import Path
from typing import Optional

import requests

import config
from data_ops.interpretation import InterpretationResult
from data_ops.store import CurveDescriptor, CurveSample, WellInfo, parse_sample_batch

logger = logging.getLogger("welllog-viewer")


def _url(path: str, base_url: Optional[str] = None) -> str:
    return f"{(base_url or config.get_api_base_url()).rstrip('/')}/{path.lstrip('/')}"


def _expect_list(payload, what: str) -> list:
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of {what}, got {type(payload).__name__}")
    return payload


def list_wells(base_url: Optional[str] = None) -> list[WellInfo]:
    """Fetch all wells known to the service.

    Raises:
        requests.HTTPError: If the request fails.
        ValueError: If the response is not a list.
    """
    resp = requests.get(_url("/wells", base_url), timeout=config.REQUEST_TIMEOUT)
    resp.raise_for_status()
    rows = _expect_list(resp.json(), "wells")
    wells = [WellInfo.from_dict(r) for r in rows if isinstance(r, dict) and r.get("id")]
    logger.debug(f"[Fetch] {len(wells)} wells")
    return wells


def list_curves(well_id: str, base_url: Optional[str] = None) -> list[CurveDescriptor]:
    """Fetch the curve inventory for a well (unfiltered; see viewer.selection).

    Raises:
        requests.HTTPError: If the request fails.
        ValueError: If the response is not a list.
    """
    resp = requests.get(
        _url(f"/wells/{well_id}/curves", base_url),
        timeout=config.REQUEST_TIMEOUT,
    )
    resp.raise_for_status()
    rows = _expect_list(resp.json(), "curves")
    curves = [c for c in (CurveDescriptor.from_dict(r) for r in rows) if c is not None]
    logger.debug(f"[Fetch] {well_id}: {len(curves)} curves")
    return curves


def fetch_curve_data(
    well_id: str,
    from_depth: float,
    to_depth: float,
    curves: list[str],
    base_url: Optional[str] = None,
) -> list[CurveSample]:
    """Fetch depth-indexed samples for *curves* between two depths.

    Args:
        well_id: Well identifier.
        from_depth: Top of the requested interval.
        to_depth: Bottom of the requested interval.
        curves: Curve names, sent comma-joined.

    Returns:
        CurveSamples in the order the service returned them.

    Raises:
        requests.HTTPError: If the request fails.
        ValueError: If the response is not a list.
    """
    resp = requests.get(
        _url(f"/wells/{well_id}/data", base_url),
        params={"from": from_depth, "to": to_depth, "curves": ",".join(curves)},
        timeout=config.REQUEST_TIMEOUT,
    )
    resp.raise_for_status()
    samples = parse_sample_batch(resp.json())
    logger.debug(
        f"[Fetch] {well_id} {from_depth}-{to_depth} {curves}: {len(samples)} samples"
    )
    return samples


def request_interpretation(
    well_id: str,
    from_depth: float,
    to_depth: float,
    curves: list[str],
    base_url: Optional[str] = None,
) -> InterpretationResult:
    """Ask the service for an AI interpretation of the given interval.

    Raises:
        requests.HTTPError: If the request fails.
        ValueError: If the response is not a JSON object.
    """
    resp = requests.post(
        _url(f"/wells/{well_id}/interpret", base_url),
        json={"from": from_depth, "to": to_depth, "curves": list(curves)},
        timeout=config.REQUEST_TIMEOUT,
    )
    resp.raise_for_status()
    return InterpretationResult.from_dict(resp.json())


def send_chat(well_id: str, message: str, base_url: Optional[str] = None) -> Optional[str]:
    """Send one chat turn about a well. Returns the reply, or None if the service gave none.

    Raises:
        requests.HTTPError: If the request fails.
    """
    resp = requests.post(
        _url(f"/wells/{well_id}/chat", base_url),
        json={"message": message},
        timeout=config.REQUEST_TIMEOUT,
    )
    resp.raise_for_status()
    payload = resp.json()
    if not isinstance(payload, dict):
        return None
    return payload.get("reply") or None


def upload_las(path: str | Path, base_url: Optional[str] = None) -> dict:
    """Upload a LAS file as multipart field ``lasFile``.

    Raises:
        requests.HTTPError: If the request fails.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    with open(path, "rb") as f:
        resp = requests.post(
            _url("/upload-las", base_url),
            files={"lasFile": (path.name, f, "application/octet-stream")},
            timeout=config.UPLOAD_TIMEOUT,
        )
    resp.raise_for_status()
    logger.info(f"[Fetch] Uploaded {path.name}")
    try:
        payload = resp.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def delete_well(well_id: str, base_url: Optional[str] = None) -> None:
    """Delete a well on the service.

    Raises:
        requests.HTTPError: If the request fails.
    """
    resp = requests.delete(
        _url(f"/wells/{well_id}", base_url),
        timeout=config.REQUEST_TIMEOUT,
    )
    resp.raise_for_status()
    logger.info(f"[Fetch] Deleted well {well_id}")
