"""Event router: public event info and schedule from the CMS."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Request

from hacksite.services.event_content import EventContent, group_schedule, rich_text_to_plain

router = APIRouter(prefix="/event", tags=["event"])


def get_event_content(request: Request) -> EventContent:
    return request.app.state.event_content


async def _current_event(content: EventContent) -> dict:
    # requests is blocking; keep it off the event loop
    event = await asyncio.to_thread(content.current)
    if event is None:
        raise HTTPException(status_code=404, detail="No current hackathon found")
    return event


def _summary(event: dict) -> dict:
    return {
        "title": event.get("title"),
        "slug": event.get("slug"),
        "tagline": event.get("tagline"),
        "description": rich_text_to_plain(event.get("description")),
        "hero_video_url": event.get("hero_video_url"),
        "start_date": event.get("start_date"),
        "end_date": event.get("end_date"),
        "demo_day_date": event.get("demo_day_date"),
        "prizes": [
            {"position": p.get("position"), "amount": p.get("amount")}
            for p in event["prizes"]
        ],
    }


@router.get("")
async def current_event(content: EventContent = Depends(get_event_content)):
    return _summary(await _current_event(content))


@router.get("/schedule")
async def schedule(content: EventContent = Depends(get_event_content)):
    event = await _current_event(content)
    grouped = group_schedule(event["schedule_items"])
    return {
        "days": [
            {
                "date": day,
                "items": [
                    {
                        "time": item.get("time"),
                        "title": item.get("title"),
                        "description": item.get("description"),
                        "location_or_link": item.get("location_or_link"),
                    }
                    for item in items
                ],
            }
            for day, items in grouped.items()
        ]
    }


@router.get("/{slug}")
async def event_by_slug(slug: str, content: EventContent = Depends(get_event_content)):
    """A past or upcoming event by its CMS slug."""
    event = await asyncio.to_thread(content.by_slug, slug)
    if event is None:
        raise HTTPException(status_code=404, detail="Hackathon not found")
    return _summary(event)
