# File: /app/routers/apps.py | Version: 1.0 | Title: Apps facade (spaces/applications/deployments/pods over Kubernetes)
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.crud import core_entities as crud_core
from app.db.session import get_db
from app.dependencies import get_deployments_client
from app.schemas import apps as schema
from app.schemas.jsonapi import error_responses
from app.security import get_current_user
from app.services.deployments import DeploymentsClient

logger = logging.getLogger(__name__)

# An auth token is required for the whole resource group
router = APIRouter(
    prefix="/apps",
    tags=["Apps"],
    dependencies=[Depends(get_current_user)],
    responses=error_responses(401, 404, 500),
)


def _space_name(db: Session, space_id: UUID) -> str:
    return crud_core.load_space(db, space_id).name


def _found(value, entity: str, entity_id: str):
    if value is None:
        raise NotFoundError(entity, entity_id)
    return value


@router.get(
    "/spaces/{spaceID}",
    response_model=schema.SimpleSpaceSingle,
    summary="list applications in a space",
)
def show_space(
    space_id: UUID = Path(..., alias="spaceID", description="ID of the space"),
    db: Session = Depends(get_db),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    name = _space_name(db, space_id)
    return schema.SimpleSpaceSingle(data=deployments.get_space(str(space_id), name))


@router.get(
    "/spaces/{spaceID}/applications/{appName}",
    response_model=schema.SimpleApplicationSingle,
    summary="list application",
)
def show_space_app(
    space_id: UUID = Path(..., alias="spaceID", description="ID of the space"),
    app_name: str = Path(..., alias="appName", description="Name of the application"),
    db: Session = Depends(get_db),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    app = deployments.get_application(_space_name(db, space_id), app_name)
    return schema.SimpleApplicationSingle(data=_found(app, "application", app_name))


@router.get(
    "/spaces/{spaceID}/applications/{appName}/deployments/{deployName}",
    response_model=schema.SimpleDeploymentSingle,
    summary="list pipe element",
)
def show_space_app_deployment(
    space_id: UUID = Path(..., alias="spaceID", description="ID of the space"),
    app_name: str = Path(..., alias="appName", description="Name of the application"),
    deploy_name: str = Path(..., alias="deployName", description="Name of the pipe deployment"),
    db: Session = Depends(get_db),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    dep = deployments.get_deployment(_space_name(db, space_id), app_name, deploy_name)
    return schema.SimpleDeploymentSingle(data=_found(dep, "deployment", deploy_name))


@router.get(
    "/spaces/{spaceID}/applications/{appName}/deployments/{deployName}/stats",
    response_model=schema.SimpleDeploymentStatsSingle,
    summary="get deployment statistics",
)
def show_deployment_stats(
    space_id: UUID = Path(..., alias="spaceID", description="ID of the space"),
    app_name: str = Path(..., alias="appName", description="Name of the application"),
    deploy_name: str = Path(..., alias="deployName", description="Name of the deployment"),
    start: Optional[float] = Query(default=None, description="start time in millis"),
    db: Session = Depends(get_db),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    stats = deployments.get_deployment_stats(_space_name(db, space_id), app_name, deploy_name, start)
    return schema.SimpleDeploymentStatsSingle(data=_found(stats, "deployment", deploy_name))


@router.get(
    "/spaces/{spaceID}/applications/{appName}/deployments/{deployName}/statseries",
    response_model=schema.SimpleDeploymentStatSeriesSingle,
    summary="list deployment statistics",
)
def show_deployment_stat_series(
    space_id: UUID = Path(..., alias="spaceID", description="ID of the space"),
    app_name: str = Path(..., alias="appName", description="Name of the application"),
    deploy_name: str = Path(..., alias="deployName", description="Name of the deployment"),
    start: Optional[float] = Query(default=None, description="start time in millis"),
    end: Optional[float] = Query(default=None, description="end time in millis"),
    limit: Optional[int] = Query(default=None, ge=1, description="maximum number of data points to return"),
    db: Session = Depends(get_db),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    series = deployments.get_deployment_stat_series(
        _space_name(db, space_id), app_name, deploy_name, start, end, limit
    )
    return schema.SimpleDeploymentStatSeriesSingle(data=_found(series, "deployment", deploy_name))


@router.put(
    "/spaces/{spaceID}/applications/{appName}/deployments/{deployName}/control",
    summary="set deployment pod count",
)
def set_deployment(
    space_id: UUID = Path(..., alias="spaceID", description="ID of the space"),
    app_name: str = Path(..., alias="appName", description="Name of the application"),
    deploy_name: str = Path(..., alias="deployName", description="Name of the deployment"),
    pod_count: int = Query(..., alias="podCount", ge=0, description="desired running pod count"),
    db: Session = Depends(get_db),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    space_name = _space_name(db, space_id)
    previous = deployments.scale_deployment(space_name, app_name, deploy_name, pod_count)
    if previous is None:
        # scale_deployment returns the old replica count; None means no such deployment
        raise NotFoundError("deployment", deploy_name)
    logger.info(
        "Set pod count",
        extra={"space": space_name, "app": app_name, "deployment": deploy_name, "pods": pod_count},
    )
    return Response(status_code=200)


@router.get(
    "/spaces/{spaceID}/environments",
    response_model=schema.SimpleEnvironmentList,
    summary="list all environments for a space",
)
def show_space_environments(
    space_id: UUID = Path(..., alias="spaceID", description="ID of the space"),
    db: Session = Depends(get_db),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    _space_name(db, space_id)
    return schema.SimpleEnvironmentList(data=deployments.get_environments())


@router.get(
    "/environments/{envName}",
    response_model=schema.SimpleEnvironmentSingle,
    summary="list environment",
)
def show_environment(
    env_name: str = Path(..., alias="envName", description="Name of the environment"),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    env = deployments.get_environment(env_name)
    return schema.SimpleEnvironmentSingle(data=_found(env, "environment", env_name))


@router.get(
    "/environments/{envName}/applications/{appName}/pods",
    response_class=JSONResponse,
    responses={200: {"content": {"application/json": {}}}},
    summary="list application pods",
)
def show_env_app_pods(
    env_name: str = Path(..., alias="envName", description="Name of the environment"),
    app_name: str = Path(..., alias="appName", description="Name of the application"),
    deployments: DeploymentsClient = Depends(get_deployments_client),
):
    pods = _found(deployments.get_pods(env_name, app_name), "environment", env_name)
    return JSONResponse({"data": [{"pod": pod} for pod in pods]})
