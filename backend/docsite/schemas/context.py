"""
Per-request context built by ContextMiddleware.

Stored on `request.state.context`. Later middleware and the page route read
it; LearningTrackMiddleware fills `current_learning_track`.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from docsite.schemas.learning_track import CurrentLearningTrack
from docsite.schemas.site import PLAN_SHORT_NAMES, Page, Version


class RequestContext(BaseModel):
    language: str
    current_version: Version
    current_product: Optional[str] = None
    # Full request path, language and version segments included
    current_path: str
    page: Optional[Page] = None
    current_learning_track: Optional[CurrentLearningTrack] = None

    def render_variables(self) -> Dict[str, Any]:
        """Variables visible to templates rendered for this request."""
        current = self.current_version.short_name
        variables: Dict[str, Any] = {
            short: short == current for short in PLAN_SHORT_NAMES.values()
        }
        variables[current] = True
        variables.update(
            currentVersion=self.current_version.name,
            currentRelease=self.current_version.release,
            currentLanguage=self.language,
            currentProduct=self.current_product,
        )
        return variables

    def for_language(self, language: str) -> "RequestContext":
        """A copy of this context that renders as if `language` was requested."""
        return self.model_copy(update={"language": language})
