"""
Form API routes.

Example forms wired through form_dependency; invalid submissions
never reach the handlers.
"""

from typing import Any

from fastapi import APIRouter, Depends

from safeinput.api.deps import form_dependency
from safeinput.components.forms import (
    FormResult,
    SecureForm,
    email_rules,
    rich_text_rules,
    safe_text_rules,
    slug_rules,
    url_rules,
)

router = APIRouter()


class ContactForm(SecureForm):
    fields = {
        "name": safe_text_rules(100),
        "email": email_rules(label="email address"),
        "website": url_rules(),
        "message": rich_text_rules(5000),
    }


class PageForm(SecureForm):
    fields = {
        "title": safe_text_rules(200),
        "slug": slug_rules(),
        "body": rich_text_rules(),
    }


@router.post("/contact")
def submit_contact(result: FormResult = Depends(form_dependency(ContactForm))) -> dict[str, Any]:
    """Accept a contact message."""
    return {"data": result.data}


@router.post("/page")
def submit_page(result: FormResult = Depends(form_dependency(PageForm))) -> dict[str, Any]:
    """Accept page content."""
    return {"data": result.data}
