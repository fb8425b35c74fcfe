"""
磁透镜模拟核心模块

该子包包含模拟的核心功能模块：
- constants: 物理常数和诊断统计
- data_classes: 数据结构定义（FieldParameters, ParticleSpec, Body, Path, Beam）
- field: 磁场模型（高斯剖面、径向包络）
- kinematics: 积分步进与洛伦兹力约定
- transport: 单粒子轨迹采样
- simulation: 束流生成
- projection: 轨迹投影为可渲染图元
"""

# 常数
from .constants import (
    ELECTRON_MASS_KG,
    PROTON_MASS_KG,
    ELEMENTARY_CHARGE_C,
    ENVELOPE_CUTOFF,
    PARTICLE_PRESETS,
    DEBUG,
    DIAGNOSTIC_STATS,
    warn_once,
    reset_diagnostic_stats,
    print_diagnostic_stats,
)

# 磁场模型
from .field import (
    gaussian,
    radial_envelope,
    field_at,
    get_profile_set,
    PROFILE_SETS,
)

# 运动学
from .kinematics import (
    integrate_step,
    ForcePolicy,
    FORCE_POLICIES,
    get_force_policy,
    make_field_update,
)

# 数据类
from .data_classes import (
    FieldParameters,
    ParticleSpec,
    SamplingConfig,
    SourceGeometry,
    Body,
    PathPoint,
    Path,
    Beam,
)

# 轨迹采样
from .transport import generate_path

# 束流生成
from .simulation import (
    build_source_lattice,
    lerp_color,
    lattice_opacity,
    generate_beam,
    beam_statistics,
)

# 投影
from .projection import (
    DisplayConfig,
    Curve3D,
    Arrow3D,
    CoilRing,
    Polyline2D,
    View2D,
    Projection,
    arrow_fraction,
    build_arrows,
    fit_view,
    project_beam,
    projection_limits,
)

__all__ = [
    # 常数
    'ELECTRON_MASS_KG',
    'PROTON_MASS_KG',
    'ELEMENTARY_CHARGE_C',
    'ENVELOPE_CUTOFF',
    'PARTICLE_PRESETS',
    'DEBUG',
    'DIAGNOSTIC_STATS',
    'warn_once',
    'reset_diagnostic_stats',
    'print_diagnostic_stats',
    # 磁场
    'gaussian',
    'radial_envelope',
    'field_at',
    'get_profile_set',
    'PROFILE_SETS',
    # 运动学
    'integrate_step',
    'ForcePolicy',
    'FORCE_POLICIES',
    'get_force_policy',
    'make_field_update',
    # 数据类
    'FieldParameters',
    'ParticleSpec',
    'SamplingConfig',
    'SourceGeometry',
    'Body',
    'PathPoint',
    'Path',
    'Beam',
    # 轨迹采样
    'generate_path',
    # 束流
    'build_source_lattice',
    'lerp_color',
    'lattice_opacity',
    'generate_beam',
    'beam_statistics',
    # 投影
    'DisplayConfig',
    'Curve3D',
    'Arrow3D',
    'CoilRing',
    'Polyline2D',
    'View2D',
    'Projection',
    'arrow_fraction',
    'build_arrows',
    'fit_view',
    'project_beam',
    'projection_limits',
]
