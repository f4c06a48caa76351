"""Meeting list, create-meeting modal and the meeting document editor."""

from __future__ import annotations

import logging
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, Response

from bookcrew.api import ApiError, BookCrewApi
from bookcrew.models import WorkspaceMember
from bookcrew.pages import MeetingDetailPage, MeetingListPage, MemberPicker, format_date
from bookcrew.pages.meeting_detail import NOTE_PLACEHOLDER
from bookcrew.render import redirect, respond
from bookcrew.routes.deps import WorkspaceContext, workspace_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workspace/{workspace_id}/meetings", tags=["meetings"])


async def _resolve_members(api: BookCrewApi, workspace_id: str, ids: list[str]) -> list[WorkspaceMember]:
    """Checked attendee ids -> member records, in the order submitted."""
    if not ids:
        return []
    try:
        members = {m.id: m for m in await api.list_members(workspace_id)}
    except ApiError as e:
        logger.error("Failed to resolve attendees: %s", e)
        members = {}
    return [members.get(i) or WorkspaceMember(id=i, name=i) for i in dict.fromkeys(ids)]


def _picker_context(picker: MemberPicker) -> dict:
    return {
        "member_q": picker.query,
        "selected": [{"id": m.id, "name": m.name} for m in picker.selected],
        "results": [
            {"id": m.id, "name": m.name, "email": m.email or ""}
            for m in picker.results
            if not picker.is_selected(m.id)
        ],
        "is_searching": picker.is_searching,
    }


# ── list ────────────────────────────────────────────────────────────────────


def _list_context(page: MeetingListPage) -> dict:
    form = page.create_form
    base = f"/workspace/{page.workspace_id}/meetings"
    pages = [
        {"number": n, "current": n == page.current_page}
        for n in range(1, page.total_pages + 1)
    ]
    return {
        "base": base,
        "title": page.search_title,
        "start_date": page.start_date,
        "end_date": page.end_date,
        "current_page": page.current_page,
        "total_pages": page.total_pages,
        "total_count": page.total_count,
        "pages": pages,
        "page_href": f"{base}?" + urlencode(
            {"title": page.search_title, "start_date": page.start_date, "end_date": page.end_date}
        ) + "&page=",
        "has_prev": page.current_page > 1,
        "has_next": page.current_page < page.total_pages,
        "prev_page": page.current_page - 1,
        "next_page": page.current_page + 1,
        "meetings": [
            {
                "id": m.id,
                "title": m.title,
                "date": format_date(m.meeting_date),
                "book_title": m.book_title or "",
                "attendee_count": m.attendee_count,
                "href": f"{base}/{m.id}",
            }
            for m in page.meetings
        ],
        "has_meetings": bool(page.meetings),
        "create_modal": (
            {
                "title": "새 미팅 문서",
                "close_href": base,
                "meeting_title": form.title,
                "meeting_date": form.meeting_date,
                "new_book_title": form.new_book_title,
                "books": [
                    {"id": b.id, "title": b.title, "selected": b.id == form.book_id}
                    for b in form.books
                ],
                **_picker_context(form.picker),
            }
            if form.is_open
            else None
        ),
    }


@router.get("", response_class=HTMLResponse)
async def meeting_list(
    request: Request,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    title: str = "",
    start_date: str = "",
    end_date: str = "",
    page: int = 1,
    applied_title: str | None = None,
    applied_start: str | None = None,
    applied_end: str | None = None,
    create: bool = False,
    member_q: str = "",
) -> Response:
    """
    Filtered, paginated meeting list.

    The filter form echoes the filters the shown page belonged to
    (`applied_*`); when they differ from the submitted ones the page number
    is stale and the first page is loaded.
    """
    state = MeetingListPage(ws.api, ws.workspace_id)
    previous = None
    if applied_title is not None:
        previous = (applied_title, applied_start or "", applied_end or "")
    await state.apply_filters(title, start_date, end_date, page=page, previous=previous)

    if create:
        state.create_form.open()
        await state.load_books()
        if member_q:
            await state.create_form.picker.search(member_q)

    return respond(request, state, "meetings", _list_context(state), title="독서 모임", workspace=ws)


@router.post("/reset-filters")
async def meeting_reset_filters(ws: Annotated[WorkspaceContext, Depends(workspace_context)]) -> Response:
    state = MeetingListPage(ws.api, ws.workspace_id)
    state.reset_filters()
    return redirect(f"/workspace/{ws.workspace_id}/meetings", state)


@router.post("/create", response_class=HTMLResponse)
async def meeting_create(
    request: Request,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    title: Annotated[str, Form()] = "",
    meeting_date: Annotated[str, Form()] = "",
    book_id: Annotated[str, Form()] = "",
    attendee_ids: Annotated[list[str] | None, Form()] = None,
    new_book_title: Annotated[str, Form()] = "",
    member_q: Annotated[str, Form()] = "",
    action: Annotated[str, Form()] = "create",
) -> Response:
    """
    Create-meeting modal submit.

    `action` selects the button pressed: add a book, search members, or
    create the meeting.
    """
    state = MeetingListPage(ws.api, ws.workspace_id)
    form = state.create_form
    form.open()
    await state.load_books()
    form.title = title
    form.meeting_date = meeting_date
    form.select_book(book_id)
    form.picker.selected = await _resolve_members(ws.api, ws.workspace_id, attendee_ids or [])

    if action == "add_book":
        await form.add_book(new_book_title)
    elif action == "search":
        await form.picker.search(member_q)
    else:
        await form.submit()

    if state.navigation is None:
        await state.load(1)
    return respond(request, state, "meetings", _list_context(state), title="독서 모임", workspace=ws)


# ── detail ──────────────────────────────────────────────────────────────────


def _detail_context(page: MeetingDetailPage) -> dict:
    meeting = page.meeting
    own = page.own_region
    return {
        "base": page.list_url,
        "detail_url": f"{page.list_url}/{page.meeting_id}",
        "title": meeting.title if meeting else "",
        "date": format_date(meeting.meeting_date) if meeting else "",
        "book_title": (meeting.book_title or "") if meeting else "",
        "attendees": [{"name": r.member_name, "mine": page.is_editable(r)} for r in page.notes],
        "notes": [
            {
                "member_id": r.member_id,
                "member_name": r.member_name,
                "content": r.content,
                "is_empty": not r.content,
                "placeholder": NOTE_PLACEHOLDER,
                "editable": page.is_editable(r),
            }
            for r in page.notes
        ],
        "own_note": {"member_id": own.member_id, "content": own.content} if own else None,
        "is_saving": page.is_saving,
        "edit": (
            {
                "title": page.title,
                "meeting_date": page.meeting_date,
                "new_book_title": page.new_book_title,
                "books": [
                    {
                        "id": b.id,
                        "title": b.title,
                        "selected": page.selected_book is not None and b.id == page.selected_book.id,
                    }
                    for b in page.books
                ],
                **_picker_context(page.picker),
            }
            if page.is_editing_info
            else None
        ),
    }


def _render_detail(request: Request, page: MeetingDetailPage, ws: WorkspaceContext) -> Response:
    title = page.meeting.title if page.meeting else "미팅"
    return respond(request, page, "meeting_detail", _detail_context(page), title=title, workspace=ws)


@router.get("/{meeting_id}", response_class=HTMLResponse)
async def meeting_detail(
    request: Request,
    meeting_id: str,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    edit: bool = False,
    member_q: str = "",
) -> Response:
    page = MeetingDetailPage(ws.api, ws.workspace_id, meeting_id)
    await page.load()
    if edit and page.meeting is not None:
        page.start_info_edit()
        await page.open_book_selector()
        if member_q:
            await page.picker.search(member_q)
    return _render_detail(request, page, ws)


@router.post("/{meeting_id}/info", response_class=HTMLResponse)
async def meeting_info_submit(
    request: Request,
    meeting_id: str,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    title: Annotated[str, Form()] = "",
    meeting_date: Annotated[str, Form()] = "",
    book_id: Annotated[str, Form()] = "",
    attendee_ids: Annotated[list[str] | None, Form()] = None,
    new_book_title: Annotated[str, Form()] = "",
    member_q: Annotated[str, Form()] = "",
    action: Annotated[str, Form()] = "save",
) -> Response:
    """Meeting info form: title, date, book and attendees saved in one call."""
    page = MeetingDetailPage(ws.api, ws.workspace_id, meeting_id)
    await page.load()
    if page.meeting is None or action == "cancel":
        return redirect(f"{page.list_url}/{meeting_id}" if page.meeting else page.list_url, page)

    page.start_info_edit()
    await page.open_book_selector()
    page.title = title
    page.meeting_date = meeting_date
    book = next((b for b in page.books if b.id == book_id), None)
    if book is not None:
        page.select_book(book)

    wanted = await _resolve_members(ws.api, ws.workspace_id, attendee_ids or [])
    wanted_ids = {m.id for m in wanted}
    for member in list(page.participants):
        if member.id not in wanted_ids:
            page.remove_attendee(member.id)
    for member in wanted:
        page.add_attendee(member)

    if action == "add_book":
        await page.create_book(new_book_title)
    elif action == "search":
        await page.picker.search(member_q)
    elif await page.save_info():
        return redirect(f"{page.list_url}/{meeting_id}", page)
    return _render_detail(request, page, ws)


@router.post("/{meeting_id}/note", response_class=HTMLResponse)
async def meeting_note_submit(
    request: Request,
    meeting_id: str,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    content: Annotated[str, Form()] = "",
) -> Response:
    """Save the viewer's own note. Other attendees' notes are never sent."""
    page = MeetingDetailPage(ws.api, ws.workspace_id, meeting_id)
    await page.load()
    region = page.own_region
    if region is not None:
        page.update_note(region.member_id, content)
    if page.meeting is not None and await page.save_note():
        return redirect(f"{page.list_url}/{meeting_id}", page)
    return _render_detail(request, page, ws)
