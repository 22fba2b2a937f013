"""Habits JSON API controllers (thin, schema-validated)."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from habitos.core.auth.controllers import jsonable_errors
from habitos.core.users.models import User
from habitos.core.users.services import local_today
from habitos.core.utils.decorators import csrf_protected
from habitos.domains.habits import services as habit_services
from habitos.domains.habits.export import build_habits_csv
from habitos.domains.habits.schemas.habit_schemas import HabitCreate, HabitUpdate, serialize_habit
from habitos.extensions import db

habit_api_bp = Blueprint("habit_api", __name__)


def _current_user_id() -> int:
    return int(get_jwt_identity())


def _today(user_id: int) -> date:
    """Today's calendar date in the user's timezone, read once per request."""
    return local_today(db.session.get(User, user_id))


def _strict_streaks() -> bool:
    return bool(current_app.config.get("STREAK_REQUIRES_GOAL_MET", False))


def _habit_payload(habit, today: date) -> dict:
    return serialize_habit(habit, today, _strict_streaks()).model_dump(mode="json")


def _validation_failed(exc: ValidationError):
    return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400


@habit_api_bp.get("")
@jwt_required()
def list_habits():
    user_id = _current_user_id()
    today = _today(user_id)
    habits = habit_services.list_habits(user_id)
    payload = [_habit_payload(habit, today) for habit in habits]
    return jsonify({"ok": True, "habits": payload})


@habit_api_bp.post("")
@jwt_required()
@csrf_protected
def create_habit():
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitCreate.model_validate(payload)
    except ValidationError as exc:
        return _validation_failed(exc)
    user_id = _current_user_id()
    habit = habit_services.create_habit(user_id, **data.model_dump())
    return jsonify({"ok": True, "habit": _habit_payload(habit, _today(user_id))}), 201


@habit_api_bp.get("/stats")
@jwt_required()
def habit_stats():
    user_id = _current_user_id()
    stats = habit_services.compute_user_stats(user_id, _today(user_id), _strict_streaks())
    return jsonify({"ok": True, "stats": stats.to_dict()})


@habit_api_bp.get("/export")
@jwt_required()
def export_habits():
    user_id = _current_user_id()
    csv_data = build_habits_csv(habit_services.list_habits(user_id))
    return Response(
        csv_data,
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=habits.csv"},
    )


@habit_api_bp.get("/<int:habit_id>")
@jwt_required()
def habit_detail(habit_id: int):
    user_id = _current_user_id()
    habit = habit_services.get_habit(user_id, habit_id)
    return jsonify({"ok": True, "habit": _habit_payload(habit, _today(user_id))})


@habit_api_bp.route("/<int:habit_id>", methods=["PUT", "PATCH"])
@jwt_required()
@csrf_protected
def update_habit(habit_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitUpdate.model_validate(payload)
    except ValidationError as exc:
        return _validation_failed(exc)
    user_id = _current_user_id()
    habit = habit_services.update_habit(user_id, habit_id, **data.model_dump(exclude_none=True))
    return jsonify({"ok": True, "habit": _habit_payload(habit, _today(user_id))})


@habit_api_bp.delete("/<int:habit_id>")
@jwt_required()
@csrf_protected
def delete_habit(habit_id: int):
    habit_services.delete_habit(_current_user_id(), habit_id)
    return jsonify({"ok": True, "message": "Habit deleted successfully"})


@habit_api_bp.post("/<int:habit_id>/complete")
@jwt_required()
@csrf_protected
def complete_habit(habit_id: int):
    user_id = _current_user_id()
    today = _today(user_id)
    habit = habit_services.complete_habit(user_id, habit_id, today)
    return jsonify({"ok": True, "habit": _habit_payload(habit, today)})


@habit_api_bp.post("/<int:habit_id>/uncomplete")
@jwt_required()
@csrf_protected
def uncomplete_habit(habit_id: int):
    user_id = _current_user_id()
    today = _today(user_id)
    habit = habit_services.uncomplete_habit(user_id, habit_id, today)
    return jsonify({"ok": True, "habit": _habit_payload(habit, today)})
