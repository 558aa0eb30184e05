"""Built-in pattern detectors: no external tool required."""

from skillscan.scanners.bash_patterns import BashPatternsScanner
from skillscan.scanners.frontmatter import FrontmatterScanner
from skillscan.scanners.package_install import PackageInstallScanner
from skillscan.scanners.prompt import PromptScanner

__all__ = ["BashPatternsScanner", "FrontmatterScanner", "PackageInstallScanner", "PromptScanner"]
