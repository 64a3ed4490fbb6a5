# Main Router - app/api/v1/routes/router.py
from fastapi import APIRouter

from app.api.v1.routes.auth.auth import router as auth_router
from app.api.v1.routes.users.users import router as users_router
from app.api.v1.routes.teams.teams import router as teams_router
from app.api.v1.routes.game.game_sessions import router as game_sessions_router
from app.api.v1.routes.game.rounds import router as rounds_router
from app.api.v1.routes.catalog.questions import router as questions_router
from app.api.v1.routes.catalog.taxonomy import categories_router, tags_router
from app.api.v1.routes.catalog.case_files import router as case_files_router
from app.api.v1.routes.scoring.submissions import router as submissions_router
from app.api.v1.routes.reporting.reporting import analytics_router, leaderboards_router
from app.api.v1.routes.bulk.data_transfer import router as data_transfer_router
from app.api.v1.routes.bulk.bulk_operations import router as bulk_operations_router
from app.api.v1.routes.files.files import router as files_router

router = APIRouter()

# Public/Auth routes
router.include_router(auth_router)

# Game administration and play
router.include_router(users_router)
router.include_router(teams_router)
router.include_router(game_sessions_router)
router.include_router(rounds_router)
router.include_router(questions_router)
router.include_router(categories_router)
router.include_router(tags_router)
router.include_router(case_files_router)
router.include_router(submissions_router)

# Reporting
router.include_router(leaderboards_router)
router.include_router(analytics_router)

# Bulk data and files
router.include_router(data_transfer_router)
router.include_router(bulk_operations_router)
router.include_router(files_router)
