"""devrefresh: local environment refresh for multi-site Drupal projects.

Automates the developer's local lifecycle:
  - Download the latest database snapshot for a site from S3
  - Import it into Lando, run ``drush deploy`` and re-import configuration
  - Toggle front-end development mode (render caches off, Twig debug on)
  - Resolve the site URI from ``.lando.yml`` and produce a login link
  - Refresh every configured site's database on Tugboat previews
"""

__version__ = "0.2.0"
__description__ = "Local environment refresh for multi-site Drupal projects"

from devrefresh.cli.app import app as cli
from devrefresh.core.pipeline import RefreshPipeline

__all__ = ["RefreshPipeline", "cli", "__version__"]
