# tools/seed_import_cli.py
# -*- coding: utf-8 -*-
"""
Bulk import Courses (+ lessons and learning objectives) from Excel/CSV.
- slug is the upsert key: existing courses are updated, missing ones created
- category is given by name and created on first use
- objectives: JSON array or comma/newline separated text, replaced wholesale
- lessons: JSON array of {title, content, order, duration}; matched by order,
  existing lessons are updated in place and never deleted (completions point at them)
Usage:
  python tools/seed_import_cli.py --file ./courses.xlsx --app-factory-path app --app-factory-func create_app
"""
import argparse
import json
import sys
from typing import Any

SIMPLE_FIELDS = (
    "title", "subtitle", "description", "content", "duration", "level",
    "is_featured", "preview_video_url",
)


def load_df(path: str, sheet: str | None = None):
    import pandas as pd
    if path.lower().endswith(".xlsx"):
        return pd.read_excel(path, sheet_name=sheet or 0)
    return pd.read_csv(path)


def _blank(val) -> bool:
    return val is None or (isinstance(val, float) and val != val) or (isinstance(val, str) and not val.strip())


def parse_list(val) -> list[str]:
    if _blank(val):
        return []
    if isinstance(val, list):
        return [str(x).strip() for x in val if str(x).strip()]
    s = str(val).strip()
    try:
        arr = json.loads(s)
        if isinstance(arr, list):
            return [str(x).strip() for x in arr if str(x).strip()]
    except ValueError:
        pass
    return [x.strip() for x in s.replace("\n", ",").split(",") if x.strip()]


def parse_lessons(val) -> list[dict]:
    if _blank(val):
        return []
    arr = val
    if not isinstance(val, list):
        try:
            arr = json.loads(str(val))
        except ValueError:
            return []
    out = []
    for i, x in enumerate(arr if isinstance(arr, list) else [], start=1):
        if isinstance(x, dict) and x.get("title"):
            out.append({
                "title": str(x["title"]).strip(),
                "content": x.get("content") or "",
                "order": int(x.get("order") or i),
                "duration": int(x.get("duration") or 0),
            })
    return out


def _coerce(field: str, value: Any):
    if field == "duration":
        return int(value)
    if field == "is_featured":
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "y")
        return bool(value)
    return value


def import_records(records: list[dict], dry_run: bool = False, log=print) -> tuple[int, int]:
    """Upsert course rows; needs an app context. Returns (created, updated)."""
    from extensions import db
    from models.course import Category, Course, Lesson, LearningObjective

    total = len(records)
    created = updated = 0
    for i, row in enumerate(records, start=1):
        slug = str(row.get("slug") or "").strip()
        if not slug:
            log(f"[{i}/{total}] skipped: no slug")
            continue

        c = Course.query.filter_by(slug=slug).first()
        is_new = c is None
        if is_new:
            if _blank(row.get("title")) or _blank(row.get("category")):
                log(f"[{i}/{total}] skipped {slug}: title and category are required for new courses")
                continue
            c = Course(slug=slug)

        for f in SIMPLE_FIELDS:
            if f in row and not _blank(row[f]):
                setattr(c, f, _coerce(f, row[f]))

        if not _blank(row.get("category")):
            name = str(row["category"]).strip()
            cat = Category.query.filter_by(name=name).first()
            if cat is None:
                cat = Category(name=name)
                db.session.add(cat)
            c.category = cat

        if dry_run:
            log(f"[{i}/{total}] {'+ CREATE' if is_new else '~ UPDATE'} {slug}")
            db.session.rollback()
            continue

        if is_new:
            db.session.add(c)
        db.session.flush()

        if "objectives" in row and not _blank(row.get("objectives")):
            LearningObjective.query.filter_by(course_id=c.id).delete()
            for text in parse_list(row["objectives"]):
                db.session.add(LearningObjective(course_id=c.id, content=text))

        existing = {l.order: l for l in Lesson.query.filter_by(course_id=c.id).all()}
        for item in parse_lessons(row.get("lessons")):
            lesson = existing.get(item["order"])
            if lesson is None:
                db.session.add(Lesson(course_id=c.id, **item))
            else:
                lesson.title = item["title"]
                lesson.content = item["content"]
                lesson.duration = item["duration"]

        db.session.commit()
        if is_new:
            created += 1
            log(f"[{i}/{total}] CREATE {slug}")
        else:
            updated += 1
            log(f"[{i}/{total}] UPDATE {slug}")
    return created, updated


def main():
    ap = argparse.ArgumentParser(description="Import Courses from Excel/CSV (upsert by slug)")
    ap.add_argument("--file", required=True, help="Excel/CSV path")
    ap.add_argument("--sheet", default=None, help="Excel sheet name (first sheet when omitted)")
    ap.add_argument("--app-factory-path", default="app", help="module holding the Flask factory")
    ap.add_argument("--app-factory-func", default="create_app", help="Flask factory function name")
    ap.add_argument("--dry-run", action="store_true", help="print only, write nothing")
    args = ap.parse_args()

    df = load_df(args.file, args.sheet)
    if "slug" not in df.columns:
        print("sheet has no slug column, cannot upsert", file=sys.stderr)
        sys.exit(1)

    mod = __import__(args.app_factory_path, fromlist=[args.app_factory_func])
    app = getattr(mod, args.app_factory_func)()

    # NaN -> None
    records = df.astype(object).where(df.notnull(), None).to_dict(orient="records")
    with app.app_context():
        created, updated = import_records(records, dry_run=args.dry_run)
    print(f"\ndone: {created} created, {updated} updated, {created + updated} total")


if __name__ == "__main__":
    main()
