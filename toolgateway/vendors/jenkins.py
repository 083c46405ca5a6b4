"""
File: toolgateway/vendors/jenkins.py
Purpose: Jenkins vendor plugin -- tool contracts, the capabilities that call JenkinsIntegration,
    and loose result types for the JSON answers.
When Used: Registered in toolgateway.vendors.PLUGINS; served when "jenkins" is in VENDORS.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from toolgateway.gateway.plugin import ToolSpec, VendorPlugin, list_instances_tool
from toolgateway.integrations.jenkins import JenkinsIntegration
from toolgateway.models.instances import JenkinsInstanceConfig


# ============================================================================
# Result types
# ============================================================================

class JenkinsJob(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    url: Optional[str] = None
    color: Optional[str] = None


class JenkinsBuild(BaseModel):
    model_config = ConfigDict(extra="allow")

    number: int
    url: Optional[str] = None
    result: Optional[str] = None
    building: bool = False


class JenkinsNode(BaseModel):
    model_config = ConfigDict(extra="allow")

    displayName: str
    offline: bool = False


# ============================================================================
# Capabilities
# ============================================================================

JOB_NAME = {"type": "string", "description": "Job name; use 'folder/job' for jobs inside folders"}
BUILD_NUMBER = {"type": "integer", "description": "Build number"}


async def list_jobs(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.list_jobs(args.get("folder"))


async def get_job_details(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.get_job_details(args["jobName"])


async def get_job_config(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.get_job_config(args["jobName"])


async def get_last_build(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.get_last_build(args["jobName"])


async def get_build_info(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.get_build_info(args["jobName"], int(args["buildNumber"]))


async def get_build_status(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.get_build_status(args["jobName"], int(args["buildNumber"]))


async def get_build_console(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.get_build_console(args["jobName"], int(args["buildNumber"]))


async def build_job(client: JenkinsIntegration, args: Dict[str, Any]):
    await client.build_job(args["jobName"])
    return f"Build triggered for {args['jobName']}"


async def get_queue(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.get_queue()


async def list_nodes(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.list_nodes()


async def get_system_info(client: JenkinsIntegration, args: Dict[str, Any]):
    return await client.get_system_info()


PLUGIN = VendorPlugin(
    name="jenkins",
    display_name="Jenkins",
    config_model=JenkinsInstanceConfig,
    client_factory=JenkinsIntegration,
    tools=(
        list_instances_tool("Jenkins"),
        ToolSpec(
            name="list_jobs",
            description="List jobs in a Jenkins instance",
            capability=list_jobs,
            properties={"folder": {"type": "string", "description": "Optional folder path"}},
            result_type=List[JenkinsJob],
        ),
        ToolSpec(
            name="get_job_details",
            description="Get details of a specific job",
            capability=get_job_details,
            properties={"jobName": JOB_NAME},
            required=("jobName",),
            result_type=Dict[str, Any],
        ),
        ToolSpec(
            name="get_job_config",
            description="Get the config.xml of a job",
            capability=get_job_config,
            properties={"jobName": JOB_NAME},
            required=("jobName",),
            result_type=str,
        ),
        ToolSpec(
            name="get_last_build",
            description="Get the last build of a job",
            capability=get_last_build,
            properties={"jobName": JOB_NAME},
            required=("jobName",),
            result_type=JenkinsBuild,
        ),
        ToolSpec(
            name="get_build_info",
            description="Get details of a specific build",
            capability=get_build_info,
            properties={"jobName": JOB_NAME, "buildNumber": BUILD_NUMBER},
            required=("jobName", "buildNumber"),
            result_type=JenkinsBuild,
        ),
        ToolSpec(
            name="get_build_status",
            description="Get the status (SUCCESS, FAILURE, BUILDING, ...) of a specific build",
            capability=get_build_status,
            properties={"jobName": JOB_NAME, "buildNumber": BUILD_NUMBER},
            required=("jobName", "buildNumber"),
            result_type=str,
        ),
        ToolSpec(
            name="get_build_console",
            description="Get console logs for a build",
            capability=get_build_console,
            properties={"jobName": JOB_NAME, "buildNumber": BUILD_NUMBER},
            required=("jobName", "buildNumber"),
            result_type=str,
        ),
        ToolSpec(
            name="build_job",
            description="Trigger a build for a specific Jenkins job",
            capability=build_job,
            properties={"jobName": JOB_NAME},
            required=("jobName",),
        ),
        ToolSpec(
            name="get_queue",
            description="Get current build queue",
            capability=get_queue,
            result_type=List[Dict[str, Any]],
        ),
        ToolSpec(
            name="list_nodes",
            description="List build agents with their online and idle state",
            capability=list_nodes,
            result_type=List[JenkinsNode],
        ),
        ToolSpec(
            name="get_system_info",
            description="Get Jenkins system information",
            capability=get_system_info,
            result_type=Dict[str, Any],
        ),
    ),
)
