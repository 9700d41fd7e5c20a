"""File-based adapters."""
