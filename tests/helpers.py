"""Fake Notion pages and an in-memory transport for store tests."""

import json

import httpx


def make_page(name, gtin=None, price=None, image=None, price_key="PREÇO", image_kind="file"):
    props = {"NOME": {"title": [{"plain_text": name}] if name else []}}
    props["GTIN"] = {"rich_text": [{"plain_text": gtin}] if gtin else []}
    props[price_key] = {"number": price}
    props["IMAGEM"] = {"files": [{image_kind: {"url": image}}] if image else []}
    return {"object": "page", "properties": props}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, status_code=200, body=None, content=None, error=None):
        self.requests = []

        def handler(request):
            self.requests.append(request)
            if error is not None:
                raise error("simulated failure", request=request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=body if body is not None else {"results": []})

        super().__init__(handler)

    @property
    def payloads(self):
        return [json.loads(request.content) for request in self.requests]
