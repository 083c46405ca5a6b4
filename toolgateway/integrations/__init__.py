"""
File: __init__.py
Purpose: Package marker for the integrations layer, which provides async API client classes for
    every backend the gateway fronts (Jenkins, Jira, Nexus, SonarQube, Bitbucket, Grafana and
    Elasticsearch).
When Used: Imported by the vendor plugins, whose client factories build one integration per
    configured instance.
"""
