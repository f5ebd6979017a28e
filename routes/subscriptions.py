# routes/subscriptions.py
"""
Manual payment flow: the user uploads a screenshot of the transfer, an admin
checks it and approves or rejects.
"""
from flask import Blueprint, jsonify, request

from routes.auth import current_actor
from routes.helpers import body
from schemas import parse, SubscriptionRequestPayload
from services import subscription_service, storage
from services.access import require_actor

subscriptions_bp = Blueprint("subscriptions", __name__, url_prefix="/api")


@subscriptions_bp.post("/subscriptions")
def request_subscription():
    """
    multipart: plan_id + file "proof"
    json:      {"plan_id": 1, "image_url": "/media/proofs/..."}
    """
    actor = require_actor(current_actor())
    data = parse(SubscriptionRequestPayload, body(), "Invalid subscription request")

    proof_url = data.image_url
    upload = request.files.get("proof")
    if upload is not None:
        proof_url = storage.save_upload(upload, "proofs")["url"]

    sub = subscription_service.request_subscription(actor, data.plan_id, proof_url)
    return jsonify(sub.to_dict()), 201


@subscriptions_bp.get("/me/subscriptions")
def my_subscriptions():
    items = subscription_service.list_user_subscriptions(current_actor())
    return jsonify({"items": [s.to_dict() for s in items]})


@subscriptions_bp.post("/subscriptions/<int:subscription_id>/cancel")
def cancel_subscription(subscription_id):
    sub = subscription_service.cancel_subscription(current_actor(), subscription_id)
    return jsonify(sub.to_dict())


# ---------- admin ----------
@subscriptions_bp.get("/admin/payment-proofs")
def admin_list_proofs():
    items = subscription_service.list_payment_proofs(current_actor(), request.args.get("status"))
    return jsonify({"items": items})


@subscriptions_bp.post("/admin/payment-proofs/<int:proof_id>/review")
def admin_review_proof(proof_id):
    """{"decision": "APPROVED" | "REJECTED"}"""
    data = body()
    proof = subscription_service.review_payment(current_actor(), proof_id, data.get("decision"))
    return jsonify({"proof": proof.to_dict(), "subscription": proof.subscription.to_dict()})
