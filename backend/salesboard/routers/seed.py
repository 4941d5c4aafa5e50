from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import seeder

router = APIRouter(prefix="/api", tags=["seed"])


@router.get(
    "/initialize",
    status_code=201,
    response_class=PlainTextResponse,
    summary="Load the seed feed into the store",
)
def initialize(request: Request, db: Session = Depends(get_db)):
    """Fetch the third-party feed and insert every record. Re-running duplicates data."""
    seeder.initialize(
        db,
        request.app.state.seed_url,
        transport=request.app.state.seed_transport,
    )
    return "Database initialized with seed data"
