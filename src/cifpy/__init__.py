from datetime import datetime
__NAME__ = "cifpy"
__DESCRIPTION__ = "FAA CIFP (ARINC 424) reader, entity graph and procedure leg geometry"
__LICENSE__ = "MIT"
__LICENSEURL__ = "https://mit-license.org/"
__COPYRIGHT__ = f"© 2023-{datetime.now().strftime('%Y')} cifpy authors"
__version__ = "0.3.1"
__version_info__ = tuple(map(int, __version__.split(".")))
__version_name__ = "Localizer"
