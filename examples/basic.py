"""
A basic example application showcasing api_problem

Run from the `examples` directory with:
    $ uvicorn basic:app
"""

import logging

from fastapi import FastAPI, Request

from api_problem import ProblemDocument
from api_problem.responses import ProblemResponse, ProblemXMLResponse

logger = logging.getLogger(__name__)

app = FastAPI()


class OutOfCredit(ProblemDocument):
    """An example of how to create a custom subclass of ProblemDocument.

    This class also defines additional headers which should be sent with
    the error response.
    """

    headers = {
        'WWW-Authenticate': 'Bearer',
    }

    def __init__(self, balance: int, cost: int) -> None:
        super(OutOfCredit, self).__init__(
            title='You do not have enough credit.',
            type='https://example.com/probs/out-of-credit',
            status=403,
            detail=f'Your current balance is {balance}, but that costs {cost}.',
            balance=balance,
        )
        self['accounts', 'primary'] = '/account/12345'


class CreditError(Exception):
    def __init__(self, balance: int, cost: int) -> None:
        super(CreditError, self).__init__(f'balance {balance} is below cost {cost}')
        self.balance = balance
        self.cost = cost


@app.exception_handler(CreditError)
async def credit_error(request: Request, exc: CreditError) -> ProblemResponse:
    logger.warning('rejected %s: %s', request.url.path, exc)

    problem = OutOfCredit(exc.balance, exc.cost)
    problem.instance = request.url.path
    if 'xml' in request.headers.get('accept', ''):
        return ProblemXMLResponse(problem)
    return ProblemResponse(problem)


@app.get('/')
async def root():
    return {'message': 'Hello World'}


@app.get('/buy')
async def buy():
    raise CreditError(balance=30, cost=50)


# Response:
#
# $ curl localhost:8000/buy
# {"type":"https://example.com/probs/out-of-credit","title":"You do not have enough credit.","status":403,"detail":"Your current balance is 30, but that costs 50.","instance":"/buy","balance":30,"accounts":{"primary":"/account/12345"}}
#
# $ curl -H 'Accept: application/problem+xml' localhost:8000/buy
# <?xml version="1.0" encoding="UTF-8"?>
# <problem><type>https://example.com/probs/out-of-credit</type><title>You do not have enough credit.</title><status>403</status><detail>Your current balance is 30, but that costs 50.</detail><instance>/buy</instance><balance>30</balance><accounts><primary>/account/12345</primary></accounts></problem>
