from app.application.use_cases.packages.package_operations import PackageService

__all__ = ["PackageService"]
