from fastapi import FastAPI


def setup_dependency_overrides(app: FastAPI, overrides: dict = None):
    """
    设置依赖覆盖

    参数:
        app: FastAPI应用实例
        overrides: 依赖覆盖字典，键为原始依赖项，值为替代依赖项
    """
    if overrides:
        for original, override in overrides.items():
            app.dependency_overrides[original] = override


def override_with(value):
    """生成一个返回固定对象的依赖覆盖函数，例如测试用的服务实例"""
    async def _dependency():
        return value
    return _dependency
