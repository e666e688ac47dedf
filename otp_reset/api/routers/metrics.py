from fastapi import APIRouter
from ...observability.metrics import metrics_app

# scraped by Prometheus, not part of the public API schema
router = APIRouter(tags=["metrics"])
router.add_api_route("/metrics", metrics_app(), methods=["GET"], include_in_schema=False)
