from fastapi import APIRouter

from waka.dependencies import DbSession
from waka.schemas.track import TrackResponse
from waka.schemas.user import PortfolioResponse, UserSummary
from waka.services.catalog_service import CatalogService

router = APIRouter()


@router.get(
    "/user-portfolio/{user_id}",
    response_model=PortfolioResponse,
    summary="Get a user's portfolio",
)
async def get_user_portfolio(user_id: int, db: DbSession):
    """
    Get a user's profile and every track they uploaded, newest first.

    An unknown user is not an error: the response has `user: null`
    and an empty portfolio.
    """
    user, tracks = await CatalogService(db).user_portfolio(user_id)
    if user is None:
        return PortfolioResponse(user=None, portfolio=[])

    return PortfolioResponse(
        user=UserSummary.model_validate(user),
        portfolio=[TrackResponse.model_validate(t) for t in tracks],
    )
