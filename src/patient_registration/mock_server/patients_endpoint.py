"""Mock patient registry endpoints."""

import logging
import random
import time
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from .config import MockServerConfig
from .store import PatientStore

patients_bp = Blueprint("patients", __name__)

logger = logging.getLogger("patient_registration.mock_server.patients")


def _config() -> MockServerConfig:
    return current_app.extensions["mock_registry_config"]


def _store() -> PatientStore:
    return current_app.extensions["mock_registry_store"]


def _error(message: str, status: int) -> tuple[Response, int]:
    logger.warning(f"Returning HTTP {status}: {message}")
    return jsonify({"success": False, "message": message}), status


def _simulate_latency() -> None:
    delay_ms = _config().response_delay_ms
    if delay_ms > 0:
        logger.debug(f"Simulating network delay: {delay_ms}ms")
        time.sleep(delay_ms / 1000.0)


def _should_fail() -> bool:
    failure_rate = _config().failure_rate
    return failure_rate > 0 and random.random() < failure_rate


def _json_body() -> dict[str, Any] | None:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else None


@patients_bp.route("/patients", methods=["POST"])
def create_patient() -> tuple[Response, int]:
    """Create a patient and return its identifiers."""
    body = _json_body()
    if body is None:
        return _error("Request body must be a JSON object", 400)

    info = body.get("personalInfo") or {}
    if not info.get("firstName") or not info.get("lastName"):
        return _error("personalInfo.firstName and personalInfo.lastName are required", 400)

    if body.get("accountType") == "family" and not body.get("familyMembers"):
        return _error("Family registration requires at least one family member", 400)

    _simulate_latency()
    if _should_fail():
        return _error(_config().failure_message, 500)

    patient = _store().create_patient(body)
    logger.info(
        f"Patient created - ID: {patient['id']}, RecordNumber: {patient['recordNumber']}, "
        f"FamilyMembers: {len(patient['familyMembers'])}"
    )
    return jsonify({"success": True, "patient": patient}), 201


@patients_bp.route("/patients/check-duplicate", methods=["GET"])
def check_duplicate() -> tuple[Response, int]:
    """Report patients matching the given name, email or phone number."""
    first_name = request.args.get("firstName", "")
    last_name = request.args.get("lastName", "")
    if not first_name or not last_name:
        return _error("firstName and lastName are required", 400)

    matches = _store().find_duplicates(
        first_name,
        last_name,
        email=request.args.get("email"),
        phone_number=request.args.get("phoneNumber"),
    )
    return jsonify({"isDuplicate": bool(matches), "potentialMatches": matches}), 200


@patients_bp.route("/patients/generate-record-number", methods=["GET"])
def generate_record_number() -> tuple[Response, int]:
    """Issue a new unique record number."""
    return jsonify({"recordNumber": _store().generate_record_number()}), 200


@patients_bp.route("/patients/<patient_id>", methods=["GET"])
def get_patient(patient_id: str) -> tuple[Response, int]:
    """Return a stored patient."""
    patient = _store().get_patient(patient_id)
    if patient is None:
        return _error(f"Patient not found: {patient_id}", 404)
    return jsonify({"success": True, "patient": patient}), 200


@patients_bp.route("/patients/<patient_id>/vitals", methods=["POST"])
def record_vitals(patient_id: str) -> tuple[Response, int]:
    """Record vital signs for an existing patient."""
    if _store().get_patient(patient_id) is None:
        return _error(f"Patient not found: {patient_id}", 404)

    body = _json_body()
    if body is None:
        return _error("Request body must be a JSON object", 400)
    if not body.get("recordedBy"):
        return _error("recordedBy is required", 400)

    _simulate_latency()
    if _should_fail():
        return _error(_config().failure_message, 500)

    entry = _store().add_vitals(patient_id, body)
    logger.info(f"Vitals recorded for patient {patient_id}")
    return jsonify({"success": True, "vitals": entry}), 201


@patients_bp.route("/registration-audit", methods=["POST"])
def registration_audit() -> tuple[Response, int]:
    """Accept a registration audit entry."""
    body = _json_body()
    if body is None or not body.get("action"):
        return _error("action is required", 400)

    _store().add_audit_entry(body)
    logger.info(f"Registration audit: {body.get('action')} by {body.get('staffId')}")
    return jsonify({"success": True}), 201
