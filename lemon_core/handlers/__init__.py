from ._base import LambdaSubHandler
from ._response import build_response, failure, notfound, redirect, success
from .lambda_handler import LambdaHandler
from .sns import LambdaSNSHandler
from .sqs import LambdaSQSHandler
from .web import LambdaWEBHandler, WEBController
from .wss import LambdaWSSHandler

__all__ = [
    "LambdaHandler",
    "LambdaSNSHandler",
    "LambdaSQSHandler",
    "LambdaSubHandler",
    "LambdaWEBHandler",
    "LambdaWSSHandler",
    "WEBController",
    "build_response",
    "failure",
    "notfound",
    "redirect",
    "success",
]
