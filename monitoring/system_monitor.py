"""
RepairShop System Monitor

Collects the host and service figures shown on the system health page:
1. CPU, memory and disk usage (psutil)
2. Database connectivity per configured connection
3. Cache, SMS gateway and Celery broker status
"""

import logging
import os
import platform
import time
import uuid

import psutil
from django.conf import settings
from django.core.cache import cache
from django.db import connections
from django.db.utils import DatabaseError
from django.utils import timezone

logger = logging.getLogger(__name__)

# Percentages above which the host is reported as degraded
RESOURCE_THRESHOLD = 90.0


class SystemMonitor:
    """
    Point-in-time health snapshot of the running instance
    """

    @staticmethod
    def get_system_metrics():
        """
        Host resource usage

        Returns:
            dict with cpu, memory, disk, uptime_seconds, platform and process keys
        """
        try:
            load_average = [round(value, 2) for value in psutil.getloadavg()]
        except (AttributeError, OSError):
            load_average = []

        memory = psutil.virtual_memory()
        disk = psutil.disk_usage(os.path.abspath(os.sep))
        process = psutil.Process(os.getpid())

        return {
            "cpu": {
                "usage_percent": psutil.cpu_percent(interval=0.1),
                "cores": psutil.cpu_count(),
                "load_average": load_average,
            },
            "memory": {
                "total": memory.total,
                "used": memory.used,
                "percent": memory.percent,
            },
            "disk": {
                "total": disk.total,
                "used": disk.used,
                "percent": disk.percent,
            },
            "uptime_seconds": int(time.time() - psutil.boot_time()),
            "platform": {
                "system": platform.system(),
                "release": platform.release(),
                "python": platform.python_version(),
            },
            "process": {
                "pid": process.pid,
                "memory_rss": process.memory_info().rss,
                "threads": process.num_threads(),
            },
        }

    @staticmethod
    def check_database():
        """
        Run ``SELECT 1`` on every configured connection

        Returns:
            dict: overall status plus per-alias status and response time in ms
        """
        results = {}
        for alias in connections:
            start_time = time.time()
            engine = connections.databases[alias].get("ENGINE", "").split(".")[-1]
            try:
                with connections[alias].cursor() as cursor:
                    cursor.execute("SELECT 1")
                    cursor.fetchone()
                results[alias] = {
                    "status": "healthy",
                    "response_time": round((time.time() - start_time) * 1000, 2),
                    "engine": engine,
                }
            except DatabaseError as e:
                logger.error(f"Database check failed for {alias}: {e}")
                results[alias] = {"status": "error", "error": str(e), "engine": engine}

        healthy = all(result["status"] == "healthy" for result in results.values())
        return {"status": "healthy" if healthy else "unhealthy", "databases": results}

    @staticmethod
    def check_cache():
        key = f"health_check_{uuid.uuid4().hex}"
        try:
            cache.set(key, "ok", 10)
            value = cache.get(key)
            cache.delete(key)
        except Exception as e:
            logger.error(f"Cache check failed: {e}")
            return {"status": "error", "error": str(e)}

        backend = settings.CACHES["default"]["BACKEND"].split(".")[-1]
        # DummyCache never stores values
        if value != "ok" and backend != "DummyCache":
            return {"status": "unhealthy", "backend": backend}
        return {"status": "healthy", "backend": backend}

    @classmethod
    def get_service_status(cls):
        from utils.sms.sender import is_configured

        broker_url = getattr(settings, "CELERY_BROKER_URL", "")
        return {
            "database": cls.check_database(),
            "cache": cls.check_cache(),
            "sms": {
                "backend": getattr(settings, "SMS_BACKEND", "").split(".")[-1],
                "configured": is_configured(),
            },
            "celery": {
                "broker_configured": bool(broker_url),
                "broker": broker_url.split("://")[0] if broker_url else None,
            },
        }

    @classmethod
    def get_health(cls):
        """
        Combine metrics and service checks into one status

        ``unhealthy`` when the database is down, ``degraded`` when CPU, memory
        or disk usage is above the threshold, otherwise ``healthy``.
        """
        metrics = cls.get_system_metrics()
        services = cls.get_service_status()

        warnings = [
            f"{name} usage at {value}%"
            for name, value in (
                ("CPU", metrics["cpu"]["usage_percent"]),
                ("Memory", metrics["memory"]["percent"]),
                ("Disk", metrics["disk"]["percent"]),
            )
            if value > RESOURCE_THRESHOLD
        ]

        if services["database"]["status"] != "healthy":
            overall = "unhealthy"
        elif warnings:
            overall = "degraded"
        else:
            overall = "healthy"

        if overall != "healthy":
            logger.warning(f"System health {overall}: {warnings or services['database']}")

        return {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "warnings": warnings,
            "metrics": metrics,
            "services": services,
        }
