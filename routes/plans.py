# routes/plans.py
from flask import Blueprint, jsonify, current_app

from routes.auth import current_actor
from routes.helpers import int_arg, body
from services import plan_service

plans_bp = Blueprint("plans", __name__, url_prefix="/api")


@plans_bp.get("/plans")
def list_plans():
    """?page=1&page_size=10 -> {plans, pagination}"""
    page = int_arg("page", 1)
    page_size = int_arg("page_size", 10)
    return jsonify(plan_service.list_plans(page, page_size))


@plans_bp.get("/plans/<int:plan_id>")
def get_plan(plan_id):
    return jsonify(plan_service.get_plan(plan_id).to_dict())


@plans_bp.post("/plans")
def create_plan():
    plan = plan_service.create_plan(current_actor(), body())
    current_app.logger.info("plan created: %s", plan.name)
    return jsonify(plan.to_dict()), 201


@plans_bp.put("/plans/<int:plan_id>")
def update_plan(plan_id):
    plan = plan_service.update_plan(current_actor(), plan_id, body())
    return jsonify(plan.to_dict())


@plans_bp.delete("/plans/<int:plan_id>")
def delete_plan(plan_id):
    plan_service.delete_plan(current_actor(), plan_id)
    return jsonify({"ok": True})
