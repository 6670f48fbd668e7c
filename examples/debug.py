"""
A basic example application showcasing api_problem with
pretty-printed responses when debug is enabled.

Run from the `examples` directory with:
    $ uvicorn debug:app
"""

from fastapi import FastAPI

from api_problem import ProblemDocument
from api_problem.responses import ProblemResponse


app = FastAPI(debug=True)


@app.get('/error')
async def error():
    problem = ProblemDocument('Something went wrong', status=500)
    problem['irken', 'invader'] = 'Zim'
    return ProblemResponse(problem, debug=app.debug)


# Response:
#
# $ curl localhost:8000/error
# {
#   "type": "about:blank",
#   "title": "Something went wrong",
#   "status": 500,
#   "irken": {
#     "invader": "Zim"
#   }
# }
