import click
import json
import logging
import pathlib
import sys
import types

from . import tagexpr
from .legacy import from_karate_options_tags
from .tag import Tag, to_result_list
from .tagset import merge

logger = logging.getLogger(__name__)


def load_tags(items, where):
    tags = []

    for item in items or []:
        if isinstance(item, str):
            tags.append(Tag.parse(item))
        elif isinstance(item, dict) and isinstance(item.get('name'), str) and isinstance(item.get('line', 0), int):
            tags.append(Tag.parse(item['name'], item.get('line', 0)))
        else:
            raise click.ClickException("{}: don't know how to interpret tag {!r}".format(where, item))

    return tags


def load_features(path):
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise click.ClickException("error parsing {}: {}".format(path, e))

    if not isinstance(data, list):
        raise click.ClickException("{}: expected a list of features".format(path))

    features = []

    for feature_i, feature in enumerate(data):
        if not isinstance(feature, dict):
            raise click.ClickException("{}: feature #{} is not an object".format(path, feature_i))

        feature_name = feature.get('name', "feature #{}".format(feature_i))
        scenarios = []

        for scenario_i, scenario in enumerate(feature.get('scenarios', [])):
            if not isinstance(scenario, dict):
                raise click.ClickException("{}: scenario #{} is not an object".format(feature_name, scenario_i))

            scenario_name = scenario.get('name', "scenario #{}".format(scenario_i))
            scenarios.append(dict(
                name=scenario_name,
                line=scenario.get('line', 0),
                tags=load_tags(scenario.get('tags'), "{}: {}".format(feature_name, scenario_name)),
            ))

        features.append(dict(
            name=feature_name,
            tags=load_tags(feature.get('tags'), feature_name),
            scenarios=scenarios,
        ))

    return features


def select_scenarios(features, selector):
    for feature in features:
        for scenario in feature['scenarios']:
            tag_set = merge(feature['tags'], scenario['tags'])

            if tag_set.evaluate(selector):
                yield feature, scenario, tag_set


def resolve_selector(selector, tags):
    if selector and tags:
        raise click.UsageError("--selector and --tags cannot be used together")

    if tags:
        return from_karate_options_tags(tags)

    return selector or None


@click.command()
@click.version_option(package_name='tagsel')
@click.option(
    '--selector', '-s',
    metavar='EXPR',
    envvar='TAGSEL_SELECTOR',
    help="tag expression selecting scenarios, e.g. \"anyOf('@smoke') && not('@slow')\""
)
@click.option(
    '--tags', '-t',
    multiple=True,
    metavar='TAGS',
    envvar='TAGSEL_TAGS',
    help="old style tag filter, e.g. '@smoke,@fast' or '~@slow'"
)
@click.option(
    '--json', 'as_json',
    is_flag=True,
    help="print selected scenarios as JSON"
)
@click.option(
    '--debug',
    is_flag=True,
    help="log debug messages and do not suppress exception stack traces"
)
@click.argument(
    'file',
    type=click.Path(
        dir_okay=False,
        exists=True,
        path_type=pathlib.Path
    )
)
def main(**kwargs):
    """
    Prints scenarios from FILE matching a tag selector.

    FILE is a JSON list of features, each with "name", "tags" and "scenarios";
    every scenario has "name", "line" and "tags". A tag is either an annotation
    string such as "@env=dev,qa" or an object {"line": 3, "name": "@env=dev,qa"}.
    Feature tags apply to all scenarios of the feature.

    Option --tags can be supplied multiple times, all filters have to match. Each
    filter is a comma separated list of tags of which any has to be present, or a
    single tag prefixed with '~' which must be absent. TAGSEL_TAGS holds space
    separated filters.
    """
    opts = types.SimpleNamespace(**kwargs)

    logging.basicConfig(
        level=logging.DEBUG if opts.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        selector = resolve_selector(opts.selector, list(opts.tags))
        logger.debug("using selector: %r", selector)

        if selector is not None:
            try:
                tagexpr.compile(selector)
            except tagexpr.TagExpressionError as e:
                raise click.BadParameter(str(e), param_hint="'--selector' / '--tags'")

        features = load_features(opts.file)
        selected = list(select_scenarios(features, selector))

        if opts.as_json:
            click.echo(json.dumps(
                [
                    dict(
                        feature=feature['name'],
                        name=scenario['name'],
                        line=scenario['line'],
                        tags=to_result_list(sorted(tag_set, key=lambda tag: (tag.line, tag.text))),
                    )
                    for feature, scenario, tag_set in selected
                ],
                indent=4
            ))
        else:
            for feature, scenario, _ in selected:
                click.echo("{}: {}".format(feature['name'], scenario['name']))
    except Exception as e:
        if not opts.debug and not isinstance(e, (click.exceptions.ClickException, click.exceptions.Abort)):
            click.secho("error: {}".format(e), err=True, fg='red')
            sys.exit(1)
        else:
            raise
