import copy
import logging
from collections import namedtuple

import yaml
from troposphere import Template

from .constants import NAT_INSTANCE_NAME, PUBLIC_SUBNET
from .nat_instance import nat_instance_resources, nat_security_group

log = logging.getLogger(__name__)


class ConfigError(ValueError):
    pass


class DuplicateResourceError(ValueError):
    pass


def resolve_includes(config, source='<config>'):
    """
    Expand shared chunks in a stack file.  The top-level `includes` maps
    chunk names to values (zone lists, whole `nat` sections); a mapping of
    exactly {'include': name} anywhere else in the file is replaced by a copy
    of that chunk.  Chunks may include other chunks, but not themselves,
    and naming a chunk that doesn't exist is an error.
    """
    config = dict(config)
    includes = config.pop('includes', None) or {}
    if not isinstance(includes, dict):
        raise ConfigError("'includes' must be a mapping in %s" % source)

    def expand(node, seen):
        if isinstance(node, dict):
            if list(node) == ['include']:
                chunk = node['include']
                if not isinstance(chunk, str) or chunk not in includes:
                    raise ConfigError("Unknown include %r in %s" %
                                      (chunk, source))
                if chunk in seen:
                    raise ConfigError("Include %r includes itself in %s" %
                                      (chunk, source))
                return expand(copy.deepcopy(includes[chunk]), seen | {chunk})
            return {k: expand(v, seen) for k, v in node.items()}
        if isinstance(node, list):
            return [expand(v, seen) for v in node]
        return node

    return expand(config, frozenset())


def load_config(path):
    log.debug("loading stack config from %s", path)
    with open(path) as f:
        config = yaml.safe_load(f)
    if not isinstance(config, dict) or \
            not isinstance(config.get('stacks'), dict):
        raise ConfigError("No stacks defined in %s" % path)
    config = resolve_includes(config, path)
    config['source'] = path
    return config


def get_stack_config(config, stack_name):
    if stack_name not in config.get('stacks', {}):
        raise ConfigError("Stack %r not found in %s" %
                          (stack_name, config.get('source', '<config>')))
    return config['stacks'][stack_name]


class NatOptions(namedtuple('NatOptions', ['image_id', 'instance_type',
                                           'zones', 'name',
                                           'public_subnet'])):
    """Settings for one NAT instance, read from a stack's `nat` section"""

    @classmethod
    def from_stack(cls, stack_config):
        nat = stack_config.get('nat')
        if not isinstance(nat, dict):
            raise ConfigError("Stack has no 'nat' section")
        if 'instance_type' not in nat:
            raise ConfigError("'nat' section is missing instance_type")
        zones = nat.get('zones')
        # an empty image id or zone list is left for the builder to reject
        return cls(
            image_id=nat.get('image_id'),
            instance_type=nat['instance_type'],
            zones=tuple(zones) if isinstance(zones, list) else zones,
            name=nat.get('name', NAT_INSTANCE_NAME),
            public_subnet=nat.get('public_subnet', PUBLIC_SUBNET),
        )


def nat_template(options, description=None):
    t = Template()
    t.set_version()
    if description:
        t.set_description(description)

    resources = [nat_security_group()]
    instance = nat_instance_resources(
        options.image_id, options.instance_type, options.zones,
        name=options.name, public_subnet=options.public_subnet)
    if not instance:
        log.warning("skipping NAT instance %r: image id or zones missing",
                    options.name)
    resources.extend(instance)

    for r in resources:
        if r.title in t.resources:
            raise DuplicateResourceError(
                "resource %r is declared more than once" % r.title)
        t.add_resource(r)
    return t


def build_nat_resources(options):
    return nat_template(options).to_dict()['Resources']


def build_stack_template(config, stack_name):
    options = NatOptions.from_stack(get_stack_config(config, stack_name))
    log.debug("building NAT template for stack %r", stack_name)
    return nat_template(options, "NAT instance for %s" % stack_name)
