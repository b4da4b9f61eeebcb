"""sbuild - 容器镜像构建流水线的来源获取阶段"""

__version__ = "0.3.0"
