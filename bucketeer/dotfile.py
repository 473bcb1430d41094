"""Read a configuration from a .bucketeer.yaml file."""

import yaml

from .clients import BitbucketGateway
from .exceptions import Error


def _load_gateway_from_remote_config(remote, remote_config):
    """Read a remote config to create a gateway object.

    Arguments
    ---------
    remote : str
        The name of the remote. Used in error messages.
    remote_config : dict
        The remote definition section in the config file.

    Returns
    -------
    RepositoriesGatewayABC
        A gateway to the remote.

    Raises
    ------
    Error
        If there was a problem reading the config section.

    """
    invalid_remote_msg = f'Invalid "{remote}" definition in dotfile. '

    if not isinstance(remote_config, dict):
        raise Error(invalid_remote_msg + "Expected a mapping.")

    # copy, so that the caller's config is left untouched
    remote_config = dict(remote_config)

    try:
        type_ = remote_config.pop("type")
    except KeyError:
        raise Error(invalid_remote_msg + 'Missing a "type" key.')

    try:
        Gateway = {"bitbucket": BitbucketGateway}[type_]
    except KeyError:
        raise Error(invalid_remote_msg + f"Unknown gateway type {type_}.")

    try:
        gateway = Gateway(**remote_config)
    except TypeError:
        raise Error(invalid_remote_msg + "Missing or unknown parameters.")

    return gateway


def load(fileobj):
    """Read a dotfile to create gateway objects.

    Arguments
    ---------
    fileobj
        A file-like object containing a YAML dotfile defining remotes.

    Returns
    -------
    Dict[RepositoriesGatewayABC]
        A dictionary of gateways by remote name.

    Raises
    ------
    Error
        If there was a problem reading the config file.

    """
    try:
        config = yaml.safe_load(fileobj)
    except yaml.YAMLError:
        raise Error("Problem decoding the YAML dotfile.")

    try:
        remotes = config["remotes"]
    except (KeyError, TypeError):
        raise Error('Invalid dotfile. Missing "remotes" key.')

    if not isinstance(remotes, dict):
        raise Error('Invalid dotfile. "remotes" must be a mapping.')

    gateways = {}
    for remote, remote_config in remotes.items():
        gateways[remote] = _load_gateway_from_remote_config(remote, remote_config)

    return gateways
