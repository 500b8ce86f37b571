"""
시각화 모듈: 코어별 Gantt Chart 및 기법 비교 그래프 생성
"""

import matplotlib
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from typing import List, Dict, Optional

from simulation.engine import GanttEntry


class Visualizer:
    """스케줄링 결과 시각화"""

    def __init__(self, interactive: bool = False):
        # 화면 출력이 없으면 비대화형 백엔드 사용
        if not interactive:
            matplotlib.use('Agg')
        self.colors = plt.cm.Set3.colors

    def _job_color(self, job_id: int):
        return self.colors[job_id % len(self.colors)]

    def draw_gantt_chart(self, gantt_data: List[GanttEntry], algorithm_name: str,
                         num_cores: int = 1, save_path: Optional[str] = None,
                         show: bool = True):
        """
        Gantt Chart 그리기 (코어당 한 줄)

        Args:
            gantt_data: Gantt Chart 데이터
            algorithm_name: 기법 이름
            num_cores: 코어 수
            save_path: 저장 경로 (None이면 저장 안 함)
            show: 화면에 표시할지 여부
        """
        if not gantt_data:
            print(f"{algorithm_name}에 대한 Gantt 차트 데이터가 없습니다")
            return

        fig, ax = plt.subplots(figsize=(16, 2 + num_cores))

        for entry in gantt_data:
            duration = entry.end_time - entry.start_time
            ax.barh(entry.core, duration, left=entry.start_time, height=0.8,
                    color=self._job_color(entry.job_id), edgecolor='black', linewidth=0.5)

            # 작업 ID 표시
            if duration >= 1:
                ax.text(entry.start_time + duration / 2, entry.core, f'J{entry.job_id}',
                        ha='center', va='center', fontsize=8, fontweight='bold')

        # 축 설정
        ax.set_yticks(range(num_cores))
        ax.set_yticklabels([f'Core {core}' for core in range(num_cores)])
        ax.invert_yaxis()
        ax.set_xlabel('Time', fontsize=12)
        ax.set_ylabel('Core', fontsize=12)
        ax.set_title(f'Gantt Chart - {algorithm_name}', fontsize=14, fontweight='bold')
        ax.grid(axis='x', alpha=0.3)

        # 범례: 작업별 색상
        job_ids = sorted(set(entry.job_id for entry in gantt_data))
        legend_elements = [mpatches.Patch(color=self._job_color(job_id), label=f'J{job_id}')
                           for job_id in job_ids]
        ax.legend(handles=legend_elements, loc='upper right', ncol=min(len(job_ids), 8),
                  fontsize=8)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Gantt 차트가 {save_path}에 저장되었습니다")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def compare_schemes(self, results: List[Dict], save_path: Optional[str] = None,
                        show: bool = True):
        """
        여러 기법의 성능 비교 그래프

        Args:
            results: 각 기법의 결과 리스트
            save_path: 저장 경로
            show: 화면에 표시할지 여부
        """
        if not results:
            print("비교할 결과가 없습니다")
            return

        names = [r['scheme'] for r in results]
        panels = [
            ('avg_waiting_time', 'Average Waiting Time', 'skyblue'),
            ('avg_turnaround_time', 'Average Turnaround Time', 'lightcoral'),
            ('avg_response_time', 'Average Response Time', 'khaki'),
            ('cpu_utilization', 'CPU Utilization (%)', 'lightgreen'),
        ]

        # 2x2 서브플롯 생성
        fig, axes = plt.subplots(2, 2, figsize=(14, 10))
        fig.suptitle('Scheduling Schemes Performance Comparison',
                     fontsize=16, fontweight='bold')

        for ax, (key, label, color) in zip(axes.flat, panels):
            values = [r['statistics'][key] for r in results]
            bars = ax.bar(range(len(names)), values, color=color, edgecolor='black')
            ax.set_xticks(range(len(names)))
            ax.set_xticklabels(names, fontsize=10)
            ax.set_ylabel(label, fontsize=11)
            ax.set_title(f'{label} Comparison', fontsize=12, fontweight='bold')
            ax.grid(axis='y', alpha=0.3)
            if key == 'cpu_utilization':
                ax.set_ylim(0, 100)

            # 값 표시
            for bar, value in zip(bars, values):
                ax.text(bar.get_x() + bar.get_width() / 2., bar.get_height(),
                        f'{value:.2f}', ha='center', va='bottom', fontsize=9)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"비교 차트가 {save_path}에 저장되었습니다")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def print_statistics_table(self, results: List[Dict]):
        """
        통계를 표 형식으로 출력

        Args:
            results: 각 기법의 결과 리스트
        """
        print("\n" + "="*110)
        print("스케줄링 기법 성능 비교")
        print("="*110)
        print(f"{'기법':<40} {'평균 대기':>12} {'평균 반환':>12} {'평균 응답':>12} "
              f"{'CPU 이용률(%)':>15} {'문맥전환':>10}")
        print("-"*110)

        for result in results:
            stats = result['statistics']
            print(f"{result['algorithm']:<40} "
                  f"{stats['avg_waiting_time']:>12.2f} "
                  f"{stats['avg_turnaround_time']:>12.2f} "
                  f"{stats['avg_response_time']:>12.2f} "
                  f"{stats['cpu_utilization']:>15.2f} "
                  f"{stats['context_switches']:>10}")

        print("="*110 + "\n")

    def print_job_details(self, result: Dict):
        """
        개별 작업의 상세 정보 출력

        Args:
            result: 기법 실행 결과
        """
        print(f"\n{'='*80}")
        print(f"작업 상세 - {result['algorithm']}")
        print(f"{'='*80}")
        print(f"{'ID':<6} {'도착':>8} {'실행':>8} {'우선순위':>10} {'시작':>8} {'종료':>8} "
              f"{'대기':>8} {'반환':>8} {'응답':>8}")
        print(f"{'-'*80}")

        for job in result['jobs']:
            print(f"{job.job_id:<6} "
                  f"{job.arrival_time:>8} "
                  f"{job.running_time:>8} "
                  f"{job.priority:>10} "
                  f"{job.start_time:>8} "
                  f"{job.finish_time:>8} "
                  f"{job.waiting_time:>8} "
                  f"{job.turnaround_time:>8} "
                  f"{job.response_time:>8}")

        print(f"{'='*80}\n")
