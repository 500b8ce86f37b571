"""
CPU 스케줄링 커널 시뮬레이터 - FastAPI 백엔드
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Union

from kernel.dispatcher import SchedulerError
from schedulers.schemes import SchedulingScheme
from simulation.engine import DEFAULT_CORES, DEFAULT_QUANTUM, JobSpec, run_simulation

app = FastAPI(
    title="CPU Scheduling Kernel Simulator",
    description="다중 코어 CPU 스케줄링 커널 시뮬레이터",
    version="1.0.0"
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 기본 실행 기법 (전체)
DEFAULT_SCHEMES = [scheme.value for scheme in SchedulingScheme]


# Pydantic 모델
class JobInput(BaseModel):
    job_id: int
    arrival_time: Union[int, float]
    running_time: Union[int, float]
    priority: int = 0


class SimulationRequest(BaseModel):
    jobs: List[JobInput]
    schemes: List[str] = Field(default_factory=lambda: list(DEFAULT_SCHEMES))
    cores: int = DEFAULT_CORES
    quantum: Union[int, float] = DEFAULT_QUANTUM


def create_job_specs(job_inputs: List[JobInput]) -> List[JobSpec]:
    """JobInput을 JobSpec으로 변환"""
    return [
        JobSpec(
            job_id=j.job_id,
            arrival_time=j.arrival_time,
            running_time=j.running_time,
            priority=j.priority
        )
        for j in job_inputs
    ]


def run_scheme(jobs: List[JobSpec], scheme_name: str, cores: int,
               quantum: Union[int, float]) -> Dict[str, Any]:
    """기법 실행 및 JSON 직렬화 가능한 결과 반환"""
    result = run_simulation(jobs, cores, SchedulingScheme.parse(scheme_name), quantum)

    return {
        'algorithm': result['algorithm'],
        'scheme': result['scheme'],
        'cores': result['cores'],
        'gantt_chart': [
            {
                'core': entry.core,
                'job_id': entry.job_id,
                'start_time': entry.start_time,
                'end_time': entry.end_time
            }
            for entry in result['gantt_chart']
        ],
        'jobs': [
            {
                'job_id': job.job_id,
                'arrival_time': job.arrival_time,
                'running_time': job.running_time,
                'priority': job.priority,
                'start_time': job.start_time,
                'finish_time': job.finish_time,
                'waiting_time': job.waiting_time,
                'turnaround_time': job.turnaround_time,
                'response_time': job.response_time
            }
            for job in result['jobs']
        ],
        'statistics': result['statistics'],
        'event_log': result['event_log']
    }


def run_request(request: SimulationRequest) -> List[Dict[str, Any]]:
    jobs = create_job_specs(request.jobs)
    try:
        return [run_scheme(jobs, name, request.cores, request.quantum)
                for name in request.schemes]
    except (ValueError, SchedulerError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/")
async def root():
    return {"message": "CPU Scheduling Kernel Simulator API", "version": "1.0.0"}


@app.get("/schemes")
async def get_schemes():
    """사용 가능한 기법 목록 반환"""
    return {
        "schemes": [
            {"id": scheme.value, "name": scheme.description, "preemptive": scheme.preemptive}
            for scheme in SchedulingScheme
        ]
    }


@app.post("/simulate")
async def simulate(request: SimulationRequest):
    """스케줄링 시뮬레이션 실행"""
    return {"success": True, "results": run_request(request)}


@app.post("/simulate/compare")
async def compare_schemes(request: SimulationRequest):
    """여러 기법 비교 시뮬레이션"""
    results = run_request(request)
    comparison: Dict[str, List[Any]] = {
        'schemes': [],
        'avg_waiting_time': [],
        'avg_turnaround_time': [],
        'avg_response_time': [],
        'cpu_utilization': [],
        'context_switches': []
    }

    # 비교 데이터 수집
    for result in results:
        stats = result['statistics']
        comparison['schemes'].append(result['scheme'])
        for key in ('avg_waiting_time', 'avg_turnaround_time', 'avg_response_time',
                    'cpu_utilization', 'context_switches'):
            comparison[key].append(stats.get(key, 0))

    return {
        "success": True,
        "results": results,
        "comparison": comparison
    }
