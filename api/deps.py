from fastapi import Request

from services.controller import MapController


def get_controller(request: Request) -> MapController:
    return request.app.state.controller
