#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CPU 스케줄링 커널 시뮬레이터 - 메인 실행 파일
트레이스 파일을 읽어 선택한 기법(또는 전체 기법)으로 시뮬레이션한다
"""

import argparse
import os
import sys
from typing import Dict, List, Optional, Sequence

from schedulers.schemes import SchedulingScheme
from simulation.engine import DEFAULT_CORES, DEFAULT_QUANTUM, JobSpec, run_simulation
from utils.trace_parser import TraceParser, TraceFormatError
from utils.visualization import Visualizer


# 사용 가능한 기법 정의
SCHEME_CHOICES = [scheme.value for scheme in SchedulingScheme] + ['all']


def print_banner():
    """배너 출력"""
    print("\n" + "="*80)
    print(" "*22 + "CPU 스케줄링 커널 시뮬레이터")
    print("="*80 + "\n")


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a job trace against the scheduling kernel.")
    parser.add_argument("trace", nargs="?", help="Trace file (arrival,running,priority or id,arrival,running,priority).")
    parser.add_argument("-c", "--cores", type=int, default=DEFAULT_CORES, help="Number of cores.")
    parser.add_argument("-s", "--scheme", default="all", choices=SCHEME_CHOICES,
                        help="Scheduling scheme, or 'all' to compare every scheme.")
    parser.add_argument("-q", "--quantum", type=float, default=DEFAULT_QUANTUM,
                        help="Time quantum for RR.")
    parser.add_argument("--random", type=int, default=0, metavar="N",
                        help="Generate N random jobs instead of reading a trace.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --random.")
    parser.add_argument("-o", "--output-dir", default="simulation_results",
                        help="Directory for charts and results.txt.")
    parser.add_argument("--no-charts", action="store_true", help="Skip chart generation.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print the event log.")
    return parser.parse_args(argv)


def _quantum_value(raw: float):
    return int(raw) if float(raw).is_integer() else raw


def run_single_scheme(scheme: SchedulingScheme, jobs: List[JobSpec], cores: int,
                      quantum, verbose: bool = False) -> Optional[Dict]:
    """단일 기법 실행"""
    print(f"\n{'='*80}")
    print(f"실행 중: {scheme.description}")
    print(f"{'='*80}\n")

    try:
        return run_simulation(jobs, cores, scheme, quantum, verbose=verbose)
    except ValueError as e:
        print(f"[오류] {scheme.description} 실행 실패: {e}")
        return None


def run_all_schemes(jobs: List[JobSpec], cores: int, quantum,
                    verbose: bool = False) -> List[Dict]:
    """모든 기법 실행"""
    results = []
    schemes = list(SchedulingScheme)

    print("\n" + "="*80)
    print("모든 스케줄링 기법 실행")
    print("="*80 + "\n")

    for index, scheme in enumerate(schemes, 1):
        print(f"[{index}/{len(schemes)}] {scheme.description} 실행 중...")
        try:
            results.append(run_simulation(jobs, cores, scheme, quantum, verbose=verbose))
            print(f"[완료] {scheme.description} 완료\n")
        except ValueError as e:
            print(f"[오류] {scheme.description} 실패: {e}\n")

    return results


def save_results(results: List[Dict], output_dir: str = "simulation_results",
                 charts: bool = True):
    """결과 저장"""
    os.makedirs(output_dir, exist_ok=True)

    visualizer = Visualizer()

    # 통계 테이블 출력
    visualizer.print_statistics_table(results)

    if charts:
        print("Gantt 차트 생성 중...")
        for result in results:
            save_path = os.path.join(output_dir, f"gantt_{result['scheme']}.png")
            visualizer.draw_gantt_chart(result['gantt_chart'], result['algorithm'],
                                        num_cores=result['cores'], save_path=save_path,
                                        show=False)
        print(f"[완료] Gantt 차트가 '{output_dir}/' 디렉토리에 저장되었습니다\n")

        # 비교 그래프 (2개 이상일 때만)
        if len(results) > 1:
            comparison_path = os.path.join(output_dir, "comparison.png")
            visualizer.compare_schemes(results, save_path=comparison_path, show=False)

    results_file = os.path.join(output_dir, "results.txt")
    save_results_to_file(results, results_file)


def save_results_to_file(results: List[Dict], filename: str):
    """결과를 텍스트 파일로 저장"""
    with open(filename, 'w', encoding='utf-8') as f:
        f.write("="*100 + "\n")
        f.write("CPU 스케줄링 시뮬레이션 결과\n")
        f.write("="*100 + "\n\n")

        # 통계 비교
        f.write(f"{'기법':<40} {'평균 대기':>12} {'평균 반환':>12} {'평균 응답':>12} {'CPU 이용률(%)':>15}\n")
        f.write("-"*100 + "\n")
        for result in results:
            stats = result['statistics']
            f.write(f"{result['algorithm']:<40} "
                    f"{stats['avg_waiting_time']:>12.2f} "
                    f"{stats['avg_turnaround_time']:>12.2f} "
                    f"{stats['avg_response_time']:>12.2f} "
                    f"{stats['cpu_utilization']:>15.2f}\n")
        f.write("\n")

        # 상세 결과
        for result in results:
            f.write("="*100 + "\n")
            f.write(f"기법: {result['algorithm']} (코어 {result['cores']}개)\n")
            f.write("-"*100 + "\n")
            f.write(f"{'ID':<6} {'도착':>8} {'실행':>8} {'우선순위':>10} {'시작':>8} {'완료':>8} "
                    f"{'대기':>8} {'반환':>8} {'응답':>8}\n")
            for job in result['jobs']:
                f.write(f"{job.job_id:<6} {job.arrival_time:>8} {job.running_time:>8} "
                        f"{job.priority:>10} {job.start_time:>8} {job.finish_time:>8} "
                        f"{job.waiting_time:>8} {job.turnaround_time:>8} {job.response_time:>8}\n")
            f.write("\n")

    print(f"[완료] 결과가 {filename}에 저장되었습니다")


def load_jobs(args: argparse.Namespace) -> List[JobSpec]:
    """트레이스 로드 또는 랜덤 작업 생성"""
    if args.random > 0:
        print("[정보] 랜덤 작업 생성 중...")
        return TraceParser.generate_random_jobs(num_jobs=args.random,
                                                max_arrival=max(args.random * 3, 30),
                                                seed=args.seed)
    if not args.trace:
        raise FileNotFoundError("트레이스 파일이 지정되지 않았습니다 (--random N 사용 가능)")
    print(f"'{args.trace}'에서 작업 로딩 중...")
    return TraceParser.parse_file(args.trace)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """메인 함수"""
    args = parse_arguments(argv)
    print_banner()

    try:
        jobs = load_jobs(args)
    except (OSError, TraceFormatError) as e:
        print(f"\n[오류] 작업 로드 실패: {e}")
        return 1

    if not jobs:
        print("\n[오류] 트레이스가 비어있습니다.")
        return 1

    TraceParser.print_job_summary(jobs)
    quantum = _quantum_value(args.quantum)

    if args.scheme == 'all':
        results = run_all_schemes(jobs, args.cores, quantum, verbose=args.verbose)
    else:
        scheme = SchedulingScheme.parse(args.scheme)
        result = run_single_scheme(scheme, jobs, args.cores, quantum, verbose=args.verbose)
        results = [result] if result else []

    if not results:
        return 1

    if len(results) == 1:
        Visualizer().print_job_details(results[0])
    save_results(results, args.output_dir, charts=not args.no_charts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
