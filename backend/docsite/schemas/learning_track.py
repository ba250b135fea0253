"""
Docsite Backend - Learning Track Schemas
=========================================

What:  Models for learning-track definitions (from YAML data files) and for
       the per-request navigation state attached to the request context.

Data file shape (`data/learning-tracks/<product>.yml`):

    getting_started:
      title: 'Get started with {% ifversion ghes %}your server{% else %}the product{% endifversion %}'
      description: 'Learn the basics.'
      guides:
        - /get-started/quickstart/hello-world
        - '{% ifversion fpt %}/get-started/quickstart/create-a-repo{% endifversion %}'
      featured_track: true

Keys of the file are track names; the file stem is the product.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class LearningTrack(BaseModel):
    """A named, ordered sequence of guide paths. Paths may contain templates."""

    title: str
    description: str = ""
    guides: List[str] = Field(default_factory=list)
    featured_track: Union[bool, str] = False


# product → track name → track
LearningTracks = Dict[str, Dict[str, LearningTrack]]


class GuideLink(BaseModel):
    href: str
    title: Optional[str] = None


class CurrentLearningTrack(BaseModel):
    """
    Learning-track navigation for the page being served.

    Created fresh for each request and discarded with it. `prev_guide` is
    absent on the first guide and `next_guide` on the last one.
    """

    track_name: str
    track_product: str
    track_title: str = ""
    number_of_guides: int = 0
    current_guide_index: int = 0
    prev_guide: Optional[GuideLink] = None
    next_guide: Optional[GuideLink] = None
