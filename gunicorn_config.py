# gunicorn_config.py
import multiprocessing
import os

# 监听地址和端口
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8080")

# 工作进程数：公式通常为 (2 * CPU核心数) + 1
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))

# 回调去重默认是进程内缓存，多 worker 部署时需设置 MSG_CALLBACK_DEDUP_BACKEND=redis
worker_class = "sync"

# 最大并发连接数
worker_connections = 1000

# 日志配置
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = "info"

# 进程名
proc_name = "gunicorn_wx_demo"

# 素材上传 / 下载可能较慢
timeout = 120
