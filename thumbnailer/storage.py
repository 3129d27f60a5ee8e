"""
Storage layer for thumbnailer.
Handles all get and put operations in a single place, so we can easily handle new storage systems.

URNs may be plain paths, file:// URLs, s3://bucket/key or (for loading only) http(s) URLs.
"""

import urllib.parse
import os
import mimetypes
import functools
import logging
from os.path import dirname

import boto3
import requests

from .constants import C

@functools.lru_cache(maxsize=4)
def mkdirs(path):
    logging.debug("mkdirs %s",path)
    if path:
        os.makedirs(path, exist_ok = True)

@functools.lru_cache(maxsize=4)
def s3_client():
    return boto3.session.Session().client( 's3' )

def local_path(urn):
    """Returns the local path for a plain path or file: URL, or None for anything else"""
    o = urllib.parse.urlparse(urn)
    if o.scheme=='file':
        return urllib.parse.unquote(o.path)
    if o.scheme=='' or len(o.scheme)==1:   # len 1: a Windows drive letter
        return urn
    return None

def save(urn, data, mimetype=None):
    o = urllib.parse.urlparse(urn)
    logging.debug("save urn=%s len=%s",urn,len(data))
    path = local_path(urn)
    if path is not None:
        mkdirs( dirname(path))
        with open(path,'wb') as f:
            f.write(data)
    elif o.scheme == 's3':
        if mimetype is None:
            mimetype = mimetypes.guess_type(o.path)[0] or 'application/octet-stream'
        s3_client().put_object(Body=data,
                               Bucket=o.netloc,
                               Key=o.path[1:],
                               ContentType=mimetype)
    else:
        raise ValueError(f"unknown scheme {o.scheme} in urn {urn}")


def load(urn):
    o = urllib.parse.urlparse(urn)
    logging.debug("load urn=%s",urn)
    path = local_path(urn)
    if path is not None:
        with open(path,'rb') as f:
            return f.read()
    elif o.scheme == 's3':
        return s3_client().get_object(Bucket=o.netloc, Key=o.path[1:])['Body'].read()
    elif o.scheme in ['http','https']:
        r = requests.get(urn, timeout=C.DEFAULT_GET_TIMEOUT)
        r.raise_for_status()
        return r.content
    else:
        raise ValueError(f"unknown scheme {o.scheme} in urn {urn}")
