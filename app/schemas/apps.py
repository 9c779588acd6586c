# File: /app/schemas/apps.py | Version: 1.0 | Title: Apps facade response types (spaces/applications/deployments/pods)
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PodStats(BaseModel):
    """pod stats"""

    starting: Optional[int] = None
    running: Optional[int] = None
    stopping: Optional[int] = None
    total: Optional[int] = None


class SimpleDeployment(BaseModel):
    """a deployment (a step in a pipeline, e.g. 'build')"""

    id: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    pods: Optional[PodStats] = None


class SimpleApp(BaseModel):
    """a description of an application"""

    id: Optional[str] = None
    name: Optional[str] = None
    pipeline: List[SimpleDeployment]


class SimpleSpace(BaseModel):
    """a space consisting of multiple applications"""

    id: Optional[UUID] = None
    name: Optional[str] = None
    applications: List[SimpleApp]


class EnvStatCores(BaseModel):
    used: Optional[float] = None
    quota: Optional[float] = None


class EnvStatMemory(BaseModel):
    used: Optional[float] = None
    quota: Optional[float] = None
    units: Optional[str] = None


class EnvStats(BaseModel):
    """resource usage and quotas for an environment"""

    cpucores: Optional[EnvStatCores] = None
    memory: Optional[EnvStatMemory] = None


class SimpleEnvironment(BaseModel):
    """a shared environment"""

    id: Optional[str] = None
    name: Optional[str] = None
    quota: Optional[EnvStats] = None


class TimedNumberTuple(BaseModel):
    """a set of time and number values"""

    time: Optional[float] = None
    value: Optional[float] = None


class SimpleDeploymentStats(BaseModel):
    cores: Optional[TimedNumberTuple] = None
    memory: Optional[TimedNumberTuple] = None


class SimpleDeploymentStatSeries(BaseModel):
    start: Optional[float] = None
    end: Optional[float] = None
    memory: List[TimedNumberTuple] = Field(default_factory=list)
    cores: List[TimedNumberTuple] = Field(default_factory=list)


# ----- response envelopes -----


class SimpleSpaceSingle(BaseModel):
    data: SimpleSpace


class SimpleApplicationSingle(BaseModel):
    data: SimpleApp


class SimpleDeploymentSingle(BaseModel):
    data: SimpleDeployment


class SimpleDeploymentStatsSingle(BaseModel):
    data: SimpleDeploymentStats


class SimpleDeploymentStatSeriesSingle(BaseModel):
    data: SimpleDeploymentStatSeries


class SimpleEnvironmentSingle(BaseModel):
    data: SimpleEnvironment


class SimpleEnvironmentList(BaseModel):
    data: List[SimpleEnvironment]
