"""
File: toolgateway/models/instances.py
Purpose: Per-vendor instance configuration schemas (the "instances" entries of each
    <vendor>.config.json file).
When Used: Validated by config.load_instances at startup; the integrations read credentials from
    them and the dispatcher asks them for their access restriction.
Why Created: Every vendor needs a slightly different credential shape (basic auth vs bearer
    token, Elasticsearch's `node` instead of `baseUrl`, Jira's mandatory project allow-list).
"""
from typing import Optional

from pydantic import AliasChoices, Field

from toolgateway.config import InstanceConfig
from toolgateway.gateway.restrictions import ProjectKeyRestriction


class ProjectRestrictedConfig(InstanceConfig):
    """Mixin for vendors whose tools take project or issue keys"""
    allowed_project_key: Optional[str] = Field(
        default=None,
        description="The ONLY project key this instance is allowed to access",
    )

    def restriction(self):
        if self.allowed_project_key:
            return ProjectKeyRestriction(self.allowed_project_key)
        return None


class JenkinsInstanceConfig(InstanceConfig):
    # Basic auth when username is set, bearer token otherwise
    username: Optional[str] = None
    api_token: str


class JiraInstanceConfig(ProjectRestrictedConfig):
    username: str
    api_token: str
    allowed_project_key: str = Field(
        min_length=1,
        description="The ONLY project key this instance is allowed to access",
    )


class BitbucketInstanceConfig(ProjectRestrictedConfig):
    username: Optional[str] = None
    api_token: str


class NexusInstanceConfig(InstanceConfig):
    username: str
    api_token: str


class SonarQubeInstanceConfig(ProjectRestrictedConfig):
    api_token: str


class GrafanaInstanceConfig(InstanceConfig):
    # Service account token or API key
    api_token: str


class ElasticsearchInstanceConfig(InstanceConfig):
    base_url: str = Field(min_length=1, validation_alias=AliasChoices("node", "baseUrl", "base_url"))
    username: str
    api_token: str
    # Internal ELK clusters commonly run on self-signed certificates
    verify_tls: bool = False
