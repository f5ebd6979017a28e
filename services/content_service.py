# services/content_service.py
import logging

from extensions import db
from models.content import (
    Mentor, TeamMember, Testimonial, Publication, DownloadableResource, Contact, Feedback,
)
from schemas import (
    parse, MentorPayload, TeamMemberPayload, TestimonialPayload, PublicationPayload,
    ResourcePayload, ContactPayload, SiteFeedbackPayload,
)
from services.access import require_actor, require_admin
from services.errors import NotFoundError

logger = logging.getLogger(__name__)

# url segment -> (model, payload schema, ordering column)
SECTIONS = {
    "mentors": (Mentor, MentorPayload, Mentor.name),
    "team": (TeamMember, TeamMemberPayload, TeamMember.name),
    "testimonials": (Testimonial, TestimonialPayload, Testimonial.created_at.desc()),
    "publications": (Publication, PublicationPayload, Publication.published_date.desc()),
    "resources": (DownloadableResource, ResourcePayload, DownloadableResource.created_at.desc()),
}


def _section(name):
    if name not in SECTIONS:
        raise NotFoundError("Unknown content section")
    return SECTIONS[name]


def list_items(section: str):
    model, _, order = _section(section)
    return model.query.order_by(order, model.id.asc()).all()


def get_item(section: str, item_id: int):
    model, _, _ = _section(section)
    row = db.session.get(model, item_id)
    if row is None:
        raise NotFoundError(f"{model.__name__} not found")
    return row


def create_item(actor, section: str, payload):
    require_admin(actor)
    model, schema, _ = _section(section)
    data = parse(schema, payload, f"Invalid {model.__name__.lower()}")
    row = model(**data.model_dump())
    db.session.add(row)
    db.session.commit()
    logger.info("%s %s created by user %s", model.__name__, row.id, actor["id"])
    return row


def update_item(actor, section: str, item_id: int, payload):
    require_admin(actor)
    row = get_item(section, item_id)
    _, schema, _ = _section(section)
    data = parse(schema, payload, f"Invalid {type(row).__name__.lower()}")
    for k, v in data.model_dump().items():
        setattr(row, k, v)
    db.session.commit()
    return row


def delete_item(actor, section: str, item_id: int):
    require_admin(actor)
    row = get_item(section, item_id)
    db.session.delete(row)
    db.session.commit()


# ---------- inbound messages ----------
def submit_contact(payload) -> Contact:
    data = parse(ContactPayload, payload, "Invalid contact message")
    row = Contact(**data.model_dump())
    db.session.add(row)
    db.session.commit()
    logger.info("contact message %s from %s", row.id, row.email)
    return row


def list_contacts(actor) -> list[Contact]:
    require_admin(actor)
    return Contact.query.order_by(Contact.created_at.desc(), Contact.id.desc()).all()


def submit_feedback(actor, payload) -> Feedback:
    require_actor(actor)
    data = parse(SiteFeedbackPayload, payload, "Invalid feedback")
    row = Feedback(user_id=actor["id"], content=data.content)
    db.session.add(row)
    db.session.commit()
    return row


def list_feedback(actor) -> list[Feedback]:
    require_admin(actor)
    return Feedback.query.order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()


TERMS_SECTIONS = [
    {
        "title": "Acceptance of terms",
        "content": "By creating an account or purchasing a plan you agree to these terms.",
    },
    {
        "title": "Subscriptions and payments",
        "content": "A subscription becomes active once an administrator has verified the payment proof. "
                   "It runs for the number of days of the chosen plan, counted from the request date.",
    },
    {
        "title": "Mentorship services",
        "content": "Mentorship sessions, course material and assessments are provided for guidance only "
                   "and do not guarantee admission, employment or scholarship awards.",
    },
    {
        "title": "Shared results",
        "content": "Career assessment results are private until you share them. A shared result is "
                   "visible to anyone with its link and shows only your first name.",
    },
    {
        "title": "Privacy",
        "content": "We store the information you submit to deliver the service and never sell it to third parties.",
    },
]
