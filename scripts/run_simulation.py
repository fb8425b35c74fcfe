#!/usr/bin/env python
"""
Launch one magnetic lens beam run from a source checkout.

Without arguments the default lens is simulated and the 3D scene, the three
orthographic views and the detector image are written under Figures/ in the
checkout root. Any argument hands control to ``magnetic_lens.runner.main``,
so the flags match the ``magnetic-lens`` console command.

Usage:
    python scripts/run_simulation.py
    python scripts/run_simulation.py --preset proton --strength -8
    python scripts/run_simulation.py --layout grid --density 5 --no-plot
"""

from pathlib import Path
import sys

# 未安装时也能从源码目录导入 magnetic_lens 包
project_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_dir))

from magnetic_lens.runner import run_full_simulation, main as runner_main


def main():
    """运行一次默认束流，或把命令行参数交给 runner"""
    if len(sys.argv) > 1:
        # 参数原样交给 magnetic_lens.runner.main 解析
        runner_main()
    else:
        # 默认透镜参数，图像写入仓库根目录下的 Figures/
        run_full_simulation(output_dir=project_dir)


if __name__ == "__main__":
    main()
