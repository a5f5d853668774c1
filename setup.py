import glob
import os
from os import path
import platform

from setuptools import setup

try:
    from Cython.Build import build_ext as _cy_build_ext
    from Cython.Distutils.extension import Extension as _cy_Extension

    HAS_CYTHON = True
except ImportError:
    _cy_build_ext = _cy_Extension = None
    HAS_CYTHON = False

DISABLE_EXTENSION = bool(os.environ.get('SWITCHYARD_DISABLE_CYTHON'))
IS_CPYTHON = platform.python_implementation() == 'CPython'

MYDIR = path.abspath(os.path.dirname(__file__))


def load_version():
    filename = path.join(MYDIR, 'switchyard', 'version.py')
    globals_ = {}
    with open(filename) as version_file:
        exec(compile(version_file.read(), filename, 'exec'), globals_)
    return globals_['__version__']


if HAS_CYTHON and IS_CPYTHON and not DISABLE_EXTENSION:
    assert _cy_Extension is not None
    assert _cy_build_ext is not None

    def list_modules(dirname, pattern):
        filenames = glob.glob(path.join(dirname, pattern))

        module_names = []
        for name in filenames:
            module, ext = path.splitext(path.basename(name))
            if module != '__init__':
                module_names.append((module, ext))

        return module_names

    package_names = [
        'switchyard',
        'switchyard.routing',
    ]

    modules_to_exclude = [
        # NOTE: inspect relies on locating the source of user objects, and
        #   gains nothing from being compiled.
        'switchyard.inspect',
    ]

    cython_directives = {'language_level': '3', 'annotation_typing': False}

    ext_modules = [
        _cy_Extension(
            package + '.' + module,
            sources=[path.join(*(package.split('.') + [module + ext]))],
            cython_directives=cython_directives,
            optional=True,
        )
        for package in package_names
        for module, ext in list_modules(path.join(MYDIR, *package.split('.')), '*.py')
        if (package + '.' + module) not in modules_to_exclude
    ]

    cmdclass = {'build_ext': _cy_build_ext}
else:
    ext_modules = []
    cmdclass = {}


setup(
    name='switchyard',
    version=load_version(),
    description='Path recognition and generation for web applications.',
    license='Apache-2.0',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
    ],
    python_requires='>=3.8',
    packages=['switchyard', 'switchyard.routing'],
    install_requires=[],
    extras_require={
        'test': ['pytest'],
        'cython': ['cython'],
    },
    cmdclass=cmdclass,
    ext_modules=ext_modules,
)
