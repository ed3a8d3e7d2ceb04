from .storage_sweep_job import start_storage_sweep_job

__all__ = ['start_storage_sweep_job']
