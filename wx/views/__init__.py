"""
wx 视图模块聚合。

按接口分组拆分为多个子模块（users、kefu、templates、mass、resources、reply），
urls 直接引用子模块。
"""
