from pydantic import BaseModel, ConfigDict, Field


class SchedulerSettings(BaseModel):
    """Global scheduler settings and the defaults used by node types."""

    model_config = ConfigDict(extra="forbid")

    log: bool = True
    display_timezone: str = "Europe/London"
    short_date_format: str = "%m/%d/%Y - %H:%M"

    default_publish_enable: bool = False
    default_publish_touch: bool = False
    default_publish_past_date_created: bool = False
    default_publish_revision: bool = False
    default_unpublish_enable: bool = False
    default_unpublish_revision: bool = False
    default_revision_log_required: bool = False


class NodeTypeSettings(BaseModel):
    """Per-type overrides. Unset keys fall back to the global defaults."""

    model_config = ConfigDict(extra="forbid")

    label: str | None = None
    publish_enable: bool | None = None
    publish_touch: bool | None = None
    publish_past_date_created: bool | None = None
    publish_revision: bool | None = None
    unpublish_enable: bool | None = None
    unpublish_revision: bool | None = None
    revision_log_required: bool | None = None
    moderated: bool = False


class Rules(BaseModel):
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    node_types: dict[str, NodeTypeSettings] = Field(default_factory=dict)
