from pydantic import BaseModel, ConfigDict, Field


class ViewCountSyncResponse(BaseModel):
    """Outcome of a view count flush; ``articles`` maps article id to hits added."""

    model_config = ConfigDict(populate_by_name=True)

    flushed: bool
    sampled_keys: int = Field(alias="sampledKeys")
    articles: dict[str, int]


class OnlineVisitorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    online_visitor_count: int = Field(alias="onlineVisitorCount")
