"""Bundled Terraform definitions and staging into a working directory."""

import shutil
from importlib import resources
from pathlib import Path

VPC_TEMPLATE = "setup-vpc.tf"


def get_terraform_path() -> Path:
    """
    Get the path to the bundled Terraform definitions.

    Returns:
        Path to the terraform directory within the package.
    """
    # Works whether installed as a package or run from source
    with resources.as_file(resources.files("rosa_lifecycle.data") / "terraform") as tf_path:
        return Path(tf_path)


def get_template_path(template_name: str) -> Path:
    """Path to one bundled Terraform file (e.g. "setup-vpc.tf")."""
    return get_terraform_path() / template_name


def stage_template(template_name: str, working_dir: Path) -> Path:
    """
    Copy a bundled Terraform file into a working directory.

    Args:
        template_name: Name of the bundled file
        working_dir: Destination directory (created if missing)

    Returns:
        Path of the staged copy.
    """
    working_dir.mkdir(parents=True, exist_ok=True)
    destination = working_dir / template_name
    shutil.copyfile(get_template_path(template_name), destination)
    return destination
