"""
Request, response, options and error payload models used by the REST handlers.
"""
