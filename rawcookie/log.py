import logging

package_logger = logging.getLogger("rawcookie")
internal_logger = logging.getLogger("rawcookie.internal")
parser_logger = logging.getLogger("rawcookie.parser")
