"""FastAPI application for the specmark local JSON API."""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..core.model import Query as RefQuery
from ..core.utils import split_for_values
from ..document import Document
from ..errors import LinkResolutionError, SpecmarkError


class RenderRequest(BaseModel):
    source: str
    name: str = "document"


def create_app(runtime: Any, token: str | None = None) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime with configuration and data directory
        token: Bearer token for authentication (None to disable auth)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="specmark API",
        description="Local JSON API for compiling specification sources",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    # Lookups share one set of lazily loaded stores for the app's lifetime.
    references = runtime.new_reference_manager()
    biblio = runtime.new_biblio_manager()

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        return {"status": "ok", "version": __version__}

    @app.post("/render")
    def render(req: RenderRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Compile source text and return the HTML."""
        doc = Document(req.name, runtime, text=req.source)
        try:
            doc.preprocess()
        except SpecmarkError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return {
            "html": doc.serialize(),
            "dfns": [
                {"id": d.id, "type": d.dfn_type, "text": d.link_text, "export": d.export}
                for d in doc.dfns
            ],
            "normative": sorted(c.key for c in doc.citations.normative.values()),
            "informative": sorted(c.key for c in doc.citations.informative.values()),
        }

    @app.get("/refs")
    def refs(
        text: str = Query(..., description="Link text"),
        type: str = Query("dfn", description="Link type"),
        for_: str | None = Query(None, alias="for", description="Comma-separated for-values"),
        status: str | None = Query(None, description="Required status"),
        exact: bool = Query(False, description="Disable inflected matching"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Resolve a link text the way an autolink would be resolved."""
        query = RefQuery(
            link_type=type,
            link_text=text,
            status=status,
            for_values=split_for_values(for_) if for_ else None,
            explicit_for=for_ is not None,
        )
        try:
            ref = references.get_reference(query, allow_inexact=not exact)
        except LinkResolutionError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except SpecmarkError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e
        return {
            "type": ref.link_type,
            "url": ref.url,
            "status": ref.status,
            "spec": ref.spec,
            "for": list(ref.for_values),
        }

    @app.get("/biblio/{key}")
    def get_biblio(key: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        try:
            entry = biblio.get_biblio(key)
        except SpecmarkError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Biblio entry {key} not found")
        return entry.to_dict()

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
